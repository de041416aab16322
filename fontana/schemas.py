from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

from .config import Venue
from .domain.services import Quote
from .models import AvailabilitySnapshot, PaymentMethod, ReservationDraft, Sector, SubmissionOutcome


class SectorRead(BaseModel):
    id: str
    name: str
    description: str
    capacity: int

    @classmethod
    def from_sector(cls, sector: Sector) -> "SectorRead":
        return cls(id=sector.id, name=sector.name, description=sector.description, capacity=sector.capacity)


class VenueRead(BaseModel):
    name: str
    price_per_vehicle: int
    persons_per_vehicle: int
    sectors: list[SectorRead]
    whatsapp: str
    email: str
    cancellation_policy: str

    @classmethod
    def from_venue(cls, venue: Venue) -> "VenueRead":
        return cls(
            name=venue.name,
            price_per_vehicle=venue.price_per_vehicle,
            persons_per_vehicle=venue.persons_per_vehicle,
            sectors=[SectorRead.from_sector(s) for s in venue.sectors],
            whatsapp=venue.whatsapp,
            email=venue.email,
            cancellation_policy=venue.cancellation_policy,
        )


class QuoteRead(BaseModel):
    vehiculos: int
    personas: int
    monto_total: int
    max_personas: int
    max_asadores_por_vehiculos: int
    max_asadores_disponibles: int
    aviso_personas: str

    @classmethod
    def from_quote(cls, quote: Quote) -> "QuoteRead":
        return cls(
            vehiculos=quote.vehicles,
            personas=quote.persons,
            monto_total=quote.total,
            max_personas=quote.max_persons,
            max_asadores_por_vehiculos=quote.max_grills_by_vehicles,
            max_asadores_disponibles=quote.max_grills_available,
            aviso_personas=quote.persons_hint,
        )


class AvailabilityRead(BaseModel):
    fecha: date
    sector: str
    total: int
    reserved: int
    remaining: int
    fallback: bool

    @classmethod
    def from_snapshot(cls, snapshot: AvailabilitySnapshot) -> "AvailabilityRead":
        return cls(
            fecha=snapshot.date,
            sector=snapshot.sector_id,
            total=snapshot.total,
            reserved=snapshot.reserved,
            remaining=snapshot.remaining,
            fallback=snapshot.is_fallback,
        )


class ReservationCreate(BaseModel):
    fecha: date
    sector_id: str = Field(min_length=1)
    personas: int = Field(ge=1)
    vehiculos: int = Field(ge=1)
    # Checked by the validator so the visitor gets the same message as the form.
    grills_reservados: int = 1
    nombre: str = Field(min_length=1, max_length=255)
    telefono: str = Field(min_length=1, max_length=50)
    email: Optional[str] = Field(default=None, max_length=255)
    metodo_pago: PaymentMethod = PaymentMethod.EFECTIVO_TRANSFERENCIA

    def to_draft(self) -> ReservationDraft:
        return ReservationDraft(
            date=self.fecha,
            sector_id=self.sector_id,
            persons=self.personas,
            vehicles=self.vehiculos,
            grills=self.grills_reservados,
            name=self.nombre,
            phone=self.telefono,
            email=self.email or None,
            payment_method=self.metodo_pago,
        )


class SubmissionRead(BaseModel):
    message: str
    payment_link: Optional[str] = None

    @classmethod
    def from_outcome(cls, outcome: SubmissionOutcome) -> "SubmissionRead":
        return cls(message=outcome.message, payment_link=outcome.payment_link)
