# storefront/domain/signup.py
import secrets
from datetime import datetime, timedelta, timezone

from pydantic import BaseModel, ConfigDict


def generate_otp(length: int = 6) -> str:
    return "".join(secrets.choice("0123456789") for _ in range(length))


class SignupSession(BaseModel):
    """
    Short-lived pending signup. Travels by its opaque token instead of living
    in ambient session state; nothing is persisted until verification.
    """

    model_config = ConfigDict(frozen=True)

    token: str
    name: str
    email: str
    otp: str
    expires_at: datetime

    @classmethod
    def start(cls, name: str, email: str, ttl_seconds: int, now: datetime | None = None) -> "SignupSession":
        now = now or datetime.now(timezone.utc)
        return cls(
            token=secrets.token_urlsafe(24),
            name=name,
            email=email,
            otp=generate_otp(),
            expires_at=now + timedelta(seconds=ttl_seconds),
        )

    def is_expired(self, now: datetime | None = None) -> bool:
        return (now or datetime.now(timezone.utc)) >= self.expires_at

    def matches(self, otp: str) -> bool:
        #compare_digest only accepts ASCII str, bytes take any input
        return secrets.compare_digest(self.otp.encode(), otp.encode())
