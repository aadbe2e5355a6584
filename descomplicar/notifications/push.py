from __future__ import annotations

import json
from typing import Any, Dict, Union

import requests
from loguru import logger
from pywebpush import WebPushException, webpush

from descomplicar.config import get_settings

PUSH_TTL = 86400  # seconds
# Push service answers for subscriptions that no longer exist
STALE_SUBSCRIPTION_STATUS = {404, 410}


class PushNotConfiguredError(Exception):
    """VAPID keys are missing."""


class PushSender:
    """Send Web Push notifications to browser subscriptions."""

    def __init__(self):
        settings = get_settings()
        if not self.is_configured():
            raise PushNotConfiguredError("VAPID keys not configured")
        self.private_key = settings.vapid_private_key
        self.mailto = settings.vapid_mailto

    @classmethod
    def is_configured(cls) -> bool:
        settings = get_settings()
        return bool(settings.vapid_public_key and settings.vapid_private_key)

    def send(
        self,
        subscription_info: Dict[str, Any],
        payload: Union[str, Dict[str, Any]],
    ) -> bool:
        """Send one push message.

        Args:
            subscription_info: {"endpoint": ..., "keys": {"p256dh": ..., "auth": ...}}.
            payload: Message string, or a dict serialized as JSON.

        Returns:
            True if delivered to the push service, False otherwise.
        """
        data = payload if isinstance(payload, str) else json.dumps(payload)
        try:
            webpush(
                subscription_info=subscription_info,
                data=data,
                vapid_private_key=self.private_key,
                vapid_claims={"sub": self.mailto},
                ttl=PUSH_TTL,
                headers={"Urgency": "normal"},
            )
        except WebPushException as e:
            status = e.response.status_code if e.response is not None else None
            if status in STALE_SUBSCRIPTION_STATUS:
                logger.warning(f"Push subscription gone ({status}): {subscription_info['endpoint']}")
            else:
                logger.error(f"Push send failed: {e}")
            return False
        except requests.RequestException as e:
            logger.error(f"Push send failed for {subscription_info['endpoint']}: {e}")
            return False

        logger.info("Push notification sent")
        return True
