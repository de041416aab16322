from datetime import date, timedelta
from typing import Any, Mapping

import pytest
from fastapi import HTTPException
from fontana.config import Settings, Venue
from fontana.domain.errors import AvailabilityLookupError, UpstreamUnavailableError
from fontana.models import AvailabilityFallback, PaymentMethod, SubmissionReceipt
from fontana.routers import reservations as router
from fontana.schemas import ReservationCreate, SubmissionRead

SOON = date.today() + timedelta(days=5)


class FakeAvailabilityGateway:
    def __init__(self, result: Mapping[str, Any] | Exception) -> None:
        self.result = result

    async def fetch(self, day: date, sector_id: str) -> Mapping[str, Any]:
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


class FakeReservationGateway:
    def __init__(self, result: SubmissionReceipt | Exception) -> None:
        self.result = result
        self.payloads: list[Mapping[str, Any]] = []

    async def submit(self, payload: Mapping[str, Any]) -> SubmissionReceipt:
        self.payloads.append(payload)
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


def _payload(**overrides: Any) -> ReservationCreate:
    data: dict[str, Any] = {
        "fecha": SOON,
        "sector_id": "rio",
        "personas": 4,
        "vehiculos": 1,
        "grills_reservados": 1,
        "nombre": "Ana",
        "telefono": "3511234567",
        "metodo_pago": PaymentMethod.EFECTIVO_TRANSFERENCIA,
    }
    data.update(overrides)
    return ReservationCreate(**data)


@pytest.fixture()
def audit_calls(monkeypatch: pytest.MonkeyPatch) -> list[dict[str, Any]]:
    calls: list[dict[str, Any]] = []

    def fake_emit(**kwargs: Any) -> None:
        calls.append(kwargs)

    monkeypatch.setattr(router, "emit_audit_log", fake_emit)
    return calls


async def _call(
    payload: ReservationCreate,
    availability: FakeAvailabilityGateway,
    reservations: FakeReservationGateway,
    settings: Settings | None = None,
) -> SubmissionRead:
    return await router.create_reservation(
        payload=payload,
        venue=Venue(),
        settings=settings or Settings(),
        availability_gateway=availability,
        reservation_gateway=reservations,
    )


@pytest.mark.asyncio
async def test_create_reservation_forwards_and_emits_audit(audit_calls: list[dict[str, Any]]) -> None:
    reservations = FakeReservationGateway(SubmissionReceipt(payment_link="https://mpago.la/1"))
    result = await _call(
        _payload(metodo_pago=PaymentMethod.MERCADO_PAGO, vehiculos=2, personas=10, grills_reservados=2),
        FakeAvailabilityGateway({"total": 10, "reserved": 5}),
        reservations,
    )

    assert result.payment_link == "https://mpago.la/1"
    assert reservations.payloads[0]["monto_total"] == 24000
    assert reservations.payloads[0]["metodo_pago"] == "mercado_pago"
    assert [c["action"] for c in audit_calls] == ["reserva.submitted"]
    assert audit_calls[0]["monto_total"] == 24000


@pytest.mark.asyncio
async def test_rejection_maps_to_422_and_skips_upstream(audit_calls: list[dict[str, Any]]) -> None:
    reservations = FakeReservationGateway(SubmissionReceipt())
    with pytest.raises(HTTPException) as excinfo:
        await _call(_payload(), FakeAvailabilityGateway({"total": 10, "reserved": 10}), reservations)

    assert excinfo.value.status_code == 422
    assert excinfo.value.detail == "Sin cupo disponible en ese sector para esa fecha"
    assert reservations.payloads == []
    assert audit_calls[0]["action"] == "reserva.rejected"


@pytest.mark.asyncio
async def test_upstream_failure_maps_to_502(audit_calls: list[dict[str, Any]]) -> None:
    with pytest.raises(HTTPException) as excinfo:
        await _call(
            _payload(),
            FakeAvailabilityGateway({}),
            FakeReservationGateway(UpstreamUnavailableError("down")),
        )
    assert excinfo.value.status_code == 502
    assert excinfo.value.detail == "Conexión caída. Probá de nuevo."
    assert audit_calls[-1]["action"] == "reserva.failed"


@pytest.mark.asyncio
async def test_lookup_failure_is_audited_and_optimistic(audit_calls: list[dict[str, Any]]) -> None:
    reservations = FakeReservationGateway(SubmissionReceipt(message="ok"))
    result = await _call(_payload(), FakeAvailabilityGateway(AvailabilityLookupError("down")), reservations)

    assert result.message == "ok"
    assert [c["action"] for c in audit_calls] == ["availability.fallback", "reserva.submitted"]
    assert audit_calls[0]["extra"] == {"policy": "optimistic"}


@pytest.mark.asyncio
async def test_strict_fallback_rejects(audit_calls: list[dict[str, Any]]) -> None:
    with pytest.raises(HTTPException) as excinfo:
        await _call(
            _payload(),
            FakeAvailabilityGateway(AvailabilityLookupError("down")),
            FakeReservationGateway(SubmissionReceipt()),
            settings=Settings(availability_fallback=AvailabilityFallback.STRICT),
        )
    assert excinfo.value.status_code == 422


@pytest.mark.asyncio
async def test_unknown_sector_is_404(audit_calls: list[dict[str, Any]]) -> None:
    with pytest.raises(HTTPException) as excinfo:
        await _call(_payload(sector_id="playa"), FakeAvailabilityGateway({}), FakeReservationGateway(SubmissionReceipt()))
    assert excinfo.value.status_code == 404


@pytest.mark.asyncio
async def test_past_date_is_422(audit_calls: list[dict[str, Any]]) -> None:
    with pytest.raises(HTTPException) as excinfo:
        await _call(
            _payload(fecha=date.today() - timedelta(days=3)),
            FakeAvailabilityGateway({}),
            FakeReservationGateway(SubmissionReceipt()),
        )
    assert excinfo.value.status_code == 422


@pytest.mark.asyncio
async def test_audit_failure_after_submit_still_returns_outcome(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_emit(**kwargs: Any) -> None:
        if kwargs["action"] == "reserva.submitted":
            raise RuntimeError("fail log")

    monkeypatch.setattr(router, "emit_audit_log", fake_emit)
    reservations = FakeReservationGateway(SubmissionReceipt(payment_link="https://mpago.la/2"))
    result = await _call(_payload(metodo_pago=PaymentMethod.MERCADO_PAGO), FakeAvailabilityGateway({}), reservations)

    assert len(reservations.payloads) == 1
    assert result.payment_link == "https://mpago.la/2"


@pytest.mark.asyncio
async def test_audit_failure_on_fallback_does_not_block(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_emit(**kwargs: Any) -> None:
        if kwargs["action"] == "availability.fallback":
            raise RuntimeError("fail log")

    monkeypatch.setattr(router, "emit_audit_log", fake_emit)
    reservations = FakeReservationGateway(SubmissionReceipt(message="ok"))
    result = await _call(_payload(), FakeAvailabilityGateway(AvailabilityLookupError("down")), reservations)

    assert result.message == "ok"
    assert len(reservations.payloads) == 1


@pytest.mark.asyncio
async def test_audit_failure_on_rejection_returns_500(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_emit(**kwargs: Any) -> None:
        raise RuntimeError("fail log")

    monkeypatch.setattr(router, "emit_audit_log", fake_emit)
    with pytest.raises(HTTPException) as excinfo:
        await _call(_payload(), FakeAvailabilityGateway({"reserved": 10}), FakeReservationGateway(SubmissionReceipt()))
    assert excinfo.value.status_code == 500
