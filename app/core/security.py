import hmac
import logging
from typing import Optional

from app.core.config import Settings, settings as default_settings
from app.core.errors import UnauthorizedError

logger = logging.getLogger(__name__)


def verify_admin_password(password: Optional[str], config: Optional[Settings] = None) -> bool:
    """Check a submitted admin password against the configured one.

    Always False when no admin password is configured.
    """
    config = config or default_settings
    expected = config.ADMIN_PASSWORD
    if not expected or not password:
        return False
    return hmac.compare_digest(password.encode("utf-8"), expected.encode("utf-8"))


def require_admin(password: Optional[str], config: Optional[Settings] = None) -> None:
    """Raise UnauthorizedError unless the password grants admin access."""
    if not verify_admin_password(password, config):
        logger.warning("Rejected admin operation: invalid admin credentials")
        raise UnauthorizedError("Admin authorization required")
