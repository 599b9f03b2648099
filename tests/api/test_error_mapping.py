from __future__ import annotations

import pytest

from app.api.errors import as_http_exception
from app.db.errors import StorageUnavailableError
from app.game.sessions.errors import (
    AnswerAlreadySubmittedError,
    InsufficientCatalogError,
    InviteNotFoundError,
    NotParticipantError,
    ProductNotInSessionError,
    SessionAccessError,
    SessionFullError,
    SessionNotFoundError,
    SessionValidationError,
    UserNotFoundError,
)


@pytest.mark.parametrize(
    ("error", "status_code", "detail"),
    [
        (
            SessionValidationError("name", "Session name is required."),
            400,
            {"code": "E_VALIDATION", "field": "name", "message": "Session name is required."},
        ),
        (ProductNotInSessionError(), 400, {"code": "E_PRODUCT_NOT_IN_SESSION"}),
        (SessionNotFoundError(), 404, {"code": "E_SESSION_NOT_FOUND"}),
        (InviteNotFoundError(), 404, {"code": "E_INVITE_NOT_FOUND"}),
        (UserNotFoundError(), 404, {"code": "E_USER_NOT_FOUND"}),
        (
            SessionAccessError("FriendsOnly"),
            403,
            {"code": "E_FORBIDDEN", "reason": "FriendsOnly"},
        ),
        (NotParticipantError(), 403, {"code": "E_FORBIDDEN", "reason": "NotParticipant"}),
        (AnswerAlreadySubmittedError(), 409, {"code": "E_ALREADY_ANSWERED"}),
        (SessionFullError(), 409, {"code": "E_SESSION_FULL"}),
        (InsufficientCatalogError(), 409, {"code": "E_INSUFFICIENT_CATALOG"}),
        (StorageUnavailableError(), 503, {"code": "E_STORAGE_UNAVAILABLE"}),
    ],
)
def test_as_http_exception(error: Exception, status_code: int, detail: dict) -> None:
    http_exc = as_http_exception(error)

    assert http_exc.status_code == status_code
    assert http_exc.detail == detail
