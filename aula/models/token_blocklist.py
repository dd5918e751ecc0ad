from __future__ import annotations
from datetime import datetime, timezone

from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from ..extensions import db


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TokenBlocklist(db.Model):
    __tablename__ = "token_blocklist"

    id: Mapped[int] = mapped_column(primary_key=True)
    # jti when the upstream sets one, otherwise a sha256 of the claims
    fingerprint: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    user_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    token_type: Mapped[str] = mapped_column(String(10), nullable=False, default="access")
    revoked_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utc_now, nullable=False)
