from functools import lru_cache
from pathlib import Path
from typing import Optional
import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from .models import AvailabilityFallback, Sector


load_dotenv()

CANCELLATION_POLICY = "Hasta las 10:00 AM del día reservado devolución total. Luego, se retienen $2.000."


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    reservas_api_base_url: str = Field(default="http://127.0.0.1:3000")
    reservas_api_timeout: float = Field(default=5.0, gt=0)
    availability_fallback: AvailabilityFallback = Field(default=AvailabilityFallback.OPTIMISTIC)
    venue_config_path: Optional[str] = Field(default=None)


class Venue(BaseModel):
    """Reference data for the venue. Loaded once, never mutated."""

    model_config = ConfigDict(frozen=True)

    name: str = "Parador La Fontana"
    price_per_vehicle: int = Field(default=12000, ge=0)
    persons_per_vehicle: int = Field(default=5, ge=1)
    default_sector_capacity: int = Field(default=10, ge=0)
    timezone: str = "America/Argentina/Cordoba"
    whatsapp: str = "+54 9 3512756126"
    email: str = "gestiondigitalsdi@gmail.com"
    cancellation_policy: str = CANCELLATION_POLICY
    sectors: tuple[Sector, ...] = (
        Sector(id="rio", name="El río", capacity=10, description="Orillas limpias y acceso directo al balneario."),
        Sector(id="sombra", name="La sombra", capacity=10, description="Arboleda amplia, reparo y siesta asegurada."),
    )

    def find_sector(self, sector_id: str) -> Sector | None:
        return next((s for s in self.sectors if s.id == sector_id), None)

    def nominal_capacity(self, sector_id: str) -> int:
        sector = self.find_sector(sector_id)
        return sector.capacity if sector is not None else self.default_sector_capacity


@lru_cache
def get_settings() -> Settings:
    return Settings(
        reservas_api_base_url=os.getenv(
            "RESERVAS_API_BASE_URL", Settings.model_fields["reservas_api_base_url"].default
        ),
        reservas_api_timeout=float(os.getenv("RESERVAS_API_TIMEOUT", "5.0")),
        availability_fallback=AvailabilityFallback(os.getenv("AVAILABILITY_FALLBACK", "optimistic")),
        venue_config_path=os.getenv("VENUE_CONFIG_PATH") or None,
    )


def load_venue(path: str | None) -> Venue:
    if path is None:
        return Venue()
    return Venue.model_validate_json(Path(path).read_text(encoding="utf-8"))


@lru_cache
def get_venue() -> Venue:
    return load_venue(get_settings().venue_config_path)
