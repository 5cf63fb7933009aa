from datetime import datetime, timedelta, timezone

import jwt

from config import settings

_ALGO = "HS256"

ROLES = ("patient", "doctor")


def create_token(user_id: str, role: str = "patient", ttl_minutes: int | None = None) -> str:
    if role not in ROLES:
        raise ValueError(f"unknown role {role!r}")
    ttl = ttl_minutes if ttl_minutes is not None else settings.jwt_ttl_minutes
    exp = datetime.now(timezone.utc) + timedelta(minutes=ttl)
    payload = {"sub": str(user_id), "role": role, "exp": exp}
    return jwt.encode(payload, settings.jwt_secret, algorithm=_ALGO)


def verify_token(token: str) -> tuple[str, str]:
    """Return `(subject, role)`; raises `jwt.PyJWTError` on a bad or expired token."""
    payload = jwt.decode(token, settings.jwt_secret, algorithms=[_ALGO])
    return payload["sub"], payload.get("role", "patient")
