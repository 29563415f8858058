from src.shared.models.enums import TripStatus


class TripStateMachine:
    ALLOWED_TRANSITIONS = {
        TripStatus.REQUESTED: [TripStatus.APPROVED, TripStatus.CANCELED],
        TripStatus.APPROVED: [TripStatus.CANCELED],
        TripStatus.CANCELED: [],
    }

    # Цели, которые принимает смена статуса согласующим
    UPDATE_TARGETS = (TripStatus.APPROVED, TripStatus.CANCELED)

    @staticmethod
    def parse_target(new_status: str) -> TripStatus | None:
        try:
            target = TripStatus(new_status)
        except ValueError:
            return None
        return target if target in TripStateMachine.UPDATE_TARGETS else None

    @staticmethod
    def can_transition(current_status: str, new_status: str) -> bool:
        try:
            curr = TripStatus(current_status)
            new = TripStatus(new_status)
            return new in TripStateMachine.ALLOWED_TRANSITIONS.get(curr, [])
        except ValueError:
            return False
