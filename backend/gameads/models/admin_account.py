"""Admin account model for the single super admin."""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from gameads.models.base import BaseModel

PASSWORD_SCHEME_ARGON2 = "argon2"
PASSWORD_SCHEME_PLAINTEXT = "plaintext"


class AdminAccount(BaseModel):
    """The super admin for the game ads dashboard.

    Exactly one row is expected. Lockout counters and the current session live
    on the row so they survive process restarts.

    password_scheme tags how password_hash is stored. Rows imported from the
    legacy server carry "plaintext" until the first successful login re-hashes
    them.
    """

    __tablename__ = "admin_accounts"

    username: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    # Always stored lower-cased
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    password_scheme: Mapped[str] = mapped_column(
        String(32), nullable=False, default=PASSWORD_SCHEME_ARGON2
    )

    # Lockout
    failed_attempt_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    locked_until: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Session (active_session_id and current_refresh_token are set together)
    active_session_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    current_refresh_token: Mapped[str | None] = mapped_column(Text, nullable=True)
    last_activity_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # Tracking
    last_login_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    @property
    def has_active_session(self) -> bool:
        return self.active_session_id is not None

    def set_session(self, session_id: str, refresh_token: str, now: datetime) -> None:
        """Bind a session id and its current refresh token."""
        self.active_session_id = session_id
        self.current_refresh_token = refresh_token
        self.last_activity_at = now

    def clear_session(self) -> None:
        self.active_session_id = None
        self.current_refresh_token = None
        self.last_activity_at = None

    def __repr__(self) -> str:
        return f"<AdminAccount {self.username}>"
