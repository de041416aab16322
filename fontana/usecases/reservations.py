import logging

from ..domain.errors import SubmissionFailedError, UpstreamRejectedError, UpstreamUnavailableError
from ..domain.gateways import ReservationGateway
from ..models import PaymentMethod, ReservationRequest, SubmissionOutcome

logger = logging.getLogger(__name__)

REJECTED_MESSAGE = "No se pudo enviar la reserva. Probá de nuevo en unos minutos."
UNAVAILABLE_MESSAGE = "Conexión caída. Probá de nuevo."

_DEFAULT_MESSAGES = {
    PaymentMethod.MERCADO_PAGO: "Reserva preconfirmada. Te enviamos el link de pago.",
    PaymentMethod.EFECTIVO_TRANSFERENCIA: "Reserva tomada. Te confirmamos por WhatsApp y email.",
}


async def submit_reservation(
    gateway: ReservationGateway,
    request: ReservationRequest,
) -> SubmissionOutcome:
    try:
        receipt = await gateway.submit(request.to_payload())
    except UpstreamRejectedError as exc:
        logger.warning("reservation for %s/%s refused upstream: %s", request.date, request.sector_id, exc)
        raise SubmissionFailedError(REJECTED_MESSAGE) from exc
    except UpstreamUnavailableError as exc:
        logger.warning("reservations API unreachable: %s", exc)
        raise SubmissionFailedError(UNAVAILABLE_MESSAGE) from exc

    message = receipt.message or _DEFAULT_MESSAGES[request.payment_method]
    return SubmissionOutcome(message=message, payment_link=receipt.payment_link)
