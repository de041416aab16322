class ReservationRejectedError(Exception):
    """A reservation failed a local admissibility check. The message is user-facing."""


class PersonsExceededError(ReservationRejectedError):
    def __init__(self, max_persons: int) -> None:
        self.max_persons = max_persons
        super().__init__(f"Ajustá personas o aumentá vehículos (máximo {max_persons} personas)")


class AvailabilityUnknownError(ReservationRejectedError):
    def __init__(self) -> None:
        super().__init__("Seleccioná fecha y sector para validar cupos")


class NoCapacityError(ReservationRejectedError):
    def __init__(self) -> None:
        super().__init__("Sin cupo disponible en ese sector para esa fecha")


class GrillsBelowMinimumError(ReservationRejectedError):
    def __init__(self) -> None:
        super().__init__("Elegí al menos 1 asador")


class GrillsExceedVehiclesError(ReservationRejectedError):
    def __init__(self, vehicles: int, max_grills: int) -> None:
        self.vehicles = vehicles
        self.max_grills = max_grills
        super().__init__(f"Con {vehicles} vehículo(s) podés reservar hasta {max_grills} asador(es).")


class GrillsExceedRemainingError(ReservationRejectedError):
    def __init__(self, remaining: int) -> None:
        self.remaining = remaining
        super().__init__(f"Quedan {remaining} asador(es) disponibles en este sector para esa fecha.")


class UnknownSectorError(Exception):
    pass


class DateInPastError(Exception):
    pass


class AvailabilityLookupError(Exception):
    """The availability API could not produce a usable answer."""


class UpstreamError(Exception):
    pass


class UpstreamRejectedError(UpstreamError):
    def __init__(self, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(f"reservations API answered {status_code}")


class UpstreamUnavailableError(UpstreamError):
    pass


class SubmissionFailedError(Exception):
    """Submission did not go through. The message is user-facing."""


class SubmissionInProgressError(Exception):
    pass


class PoliciesNotAcceptedError(Exception):
    pass
