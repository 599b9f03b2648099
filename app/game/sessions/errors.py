from app.game.sessions.constants import ACCESS_REASON_NOT_PARTICIPANT


class GameSessionError(Exception):
    code = "E_GAME_SESSION"


class SessionValidationError(GameSessionError):
    code = "E_VALIDATION"

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message


class ProductNotInSessionError(GameSessionError):
    code = "E_PRODUCT_NOT_IN_SESSION"


class SessionNotFoundError(GameSessionError):
    code = "E_SESSION_NOT_FOUND"


class InviteNotFoundError(GameSessionError):
    code = "E_INVITE_NOT_FOUND"


class UserNotFoundError(GameSessionError):
    code = "E_USER_NOT_FOUND"


class SessionAccessError(GameSessionError):
    code = "E_FORBIDDEN"

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class NotParticipantError(SessionAccessError):
    def __init__(self) -> None:
        super().__init__(ACCESS_REASON_NOT_PARTICIPANT)


class SessionConflictError(GameSessionError):
    code = "E_CONFLICT"


class AnswerAlreadySubmittedError(SessionConflictError):
    code = "E_ALREADY_ANSWERED"


class AlreadyParticipantError(SessionConflictError):
    code = "E_ALREADY_PARTICIPANT"


class SessionFullError(SessionConflictError):
    code = "E_SESSION_FULL"


class SessionClosedError(SessionConflictError):
    code = "E_SESSION_CLOSED"


class InsufficientCatalogError(SessionConflictError):
    code = "E_INSUFFICIENT_CATALOG"


class InvalidStatusTransitionError(SessionConflictError):
    code = "E_INVALID_STATUS_TRANSITION"


class InvitePendingError(SessionConflictError):
    code = "E_INVITE_PENDING"


class InviteAlreadyAcceptedError(SessionConflictError):
    code = "E_INVITE_ALREADY_ACCEPTED"


class InviteAlreadyProcessedError(SessionConflictError):
    code = "E_INVITE_ALREADY_PROCESSED"
