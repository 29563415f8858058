from enum import Enum


class TripStatus(str, Enum):
    """Статусы заявки на поездку."""
    REQUESTED = "requested"
    APPROVED = "approved"
    CANCELED = "canceled"

    def __str__(self) -> str:
        return self.value
