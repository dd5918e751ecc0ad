import logging
import os
from datetime import datetime, timedelta, timezone

from aula import create_app
from aula.extensions import db
from aula.models import TokenBlocklist

logger = logging.getLogger("aula.purge_tokens")

# tokens live 7 days, keep revocations one day past that
PURGE_AFTER_DAYS = int(os.getenv("PURGE_AFTER_DAYS", "8"))


def purge(days: int = PURGE_AFTER_DAYS) -> int:
    """Delete blocklist rows older than ``days``; must run inside an app context."""
    cutoff = datetime.now(timezone.utc) - timedelta(days=days)
    removed = TokenBlocklist.query.filter(TokenBlocklist.revoked_at < cutoff).delete()
    db.session.commit()
    return removed


if __name__ == "__main__":
    app = create_app()
    with app.app_context():
        count = purge()
        logger.info("purged %d revoked token(s) older than %d days", count, PURGE_AFTER_DAYS)
        print(f"Purged {count} revoked token(s)")
