from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

ROLE_USER = "user"
ROLE_ADMIN = "admin"
_KNOWN_ROLES = frozenset({ROLE_USER, ROLE_ADMIN})


@dataclass(frozen=True, slots=True)
class Principal:
    user_id: int
    role: str = ROLE_USER

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


def extract_bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer":
        return None
    token = token.strip()
    return token or None


def decode_principal(token: str, *, secret: str, algorithm: str) -> Principal | None:
    """Return the principal carried by a signed token, or None when it cannot be trusted."""
    if not token or not secret:
        return None
    try:
        payload = jwt.decode(token, secret, algorithms=[algorithm])
    except JWTError:
        return None

    raw_user_id = payload.get("id", payload.get("sub"))
    try:
        user_id = int(raw_user_id)
    except (TypeError, ValueError):
        return None
    if user_id <= 0:
        return None

    role = payload.get("role") or ROLE_USER
    if role not in _KNOWN_ROLES:
        role = ROLE_USER
    return Principal(user_id=user_id, role=role)


def issue_token(
    principal: Principal,
    *,
    secret: str,
    algorithm: str,
    now_utc: datetime | None = None,
    ttl: timedelta = timedelta(days=7),
) -> str:
    issued_at = now_utc or datetime.now(timezone.utc)
    claims = {
        "id": principal.user_id,
        "role": principal.role,
        "iat": int(issued_at.timestamp()),
        "exp": int((issued_at + ttl).timestamp()),
    }
    return jwt.encode(claims, secret, algorithm=algorithm)
