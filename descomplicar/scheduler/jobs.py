from __future__ import annotations

from datetime import datetime

from loguru import logger

from descomplicar.db.database import get_sync_session
from descomplicar.notifications.triggers import ExpirationTriggerService


def run_expiration_triggers():
    """Daily expiration trigger run (subscription_expiring / subscription_expired).

    Any failure aborts this run only; the next scheduled tick is unaffected.
    """
    logger.info(f"Running expiration triggers at {datetime.now()}")

    try:
        with get_sync_session() as session:
            results = ExpirationTriggerService(session).run()
    except Exception as e:
        logger.error(f"Expiration triggers error: {e}")
        return None

    logger.info("Expiration triggers finished")
    return results
