from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import StrEnum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class PaymentMethod(StrEnum):
    MERCADO_PAGO = "mercado_pago"
    EFECTIVO_TRANSFERENCIA = "efectivo_transferencia"


class AvailabilityFallback(StrEnum):
    OPTIMISTIC = "optimistic"
    STRICT = "strict"


class Sector(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    capacity: int = Field(ge=0)
    description: str = ""


@dataclass(frozen=True)
class AvailabilitySnapshot:
    date: date
    sector_id: str
    total: int
    reserved: int
    is_fallback: bool = False

    @property
    def remaining(self) -> int:
        return max(0, self.total - self.reserved)


@dataclass(frozen=True)
class ReservationDraft:
    """Raw form input, before any admissibility check."""

    date: date
    sector_id: str
    persons: int
    vehicles: int
    grills: int
    name: str
    phone: str
    email: Optional[str]
    payment_method: PaymentMethod


@dataclass(frozen=True)
class ReservationRequest:
    date: date
    sector_id: str
    persons: int
    vehicles: int
    grills: int
    name: str
    phone: str
    email: Optional[str]
    payment_method: PaymentMethod
    total_amount: int
    cancellation_policy: str

    def to_payload(self) -> dict[str, Any]:
        return {
            "fecha": self.date.isoformat(),
            "sector_id": self.sector_id,
            "grills_reservados": self.grills,
            "personas": self.persons,
            "vehiculos": self.vehicles,
            "nombre": self.name,
            "telefono": self.phone,
            "email": self.email or "",
            "metodo_pago": self.payment_method.value,
            "monto_total": self.total_amount,
            "politicas": {"cancelacion": self.cancellation_policy},
        }


@dataclass(frozen=True)
class SubmissionReceipt:
    """What the reservations API answered on a 2xx."""

    message: Optional[str] = None
    payment_link: Optional[str] = None


@dataclass(frozen=True)
class SubmissionOutcome:
    message: str
    payment_link: Optional[str] = None

    @property
    def requires_redirect(self) -> bool:
        return bool(self.payment_link)
