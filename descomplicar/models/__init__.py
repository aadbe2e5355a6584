from descomplicar.models.account import Account
from descomplicar.models.email_log import EmailLog
from descomplicar.models.notification_log import NotificationTemplateUsageLog
from descomplicar.models.notification_template import (
    EXPIRATION_TRIGGERS,
    NotificationTemplate,
    NotificationTrigger,
    TemplateChannel,
)
from descomplicar.models.plan import Plan
from descomplicar.models.push_subscription import PushSubscription
from descomplicar.models.subscription import Subscription
from descomplicar.models.user import User

__all__ = [
    "Account",
    "EXPIRATION_TRIGGERS",
    "EmailLog",
    "NotificationTemplate",
    "NotificationTemplateUsageLog",
    "NotificationTrigger",
    "Plan",
    "PushSubscription",
    "Subscription",
    "TemplateChannel",
    "User",
]
