"""Notification triggers.

Welcome messages go out when a user and account are created. Expiration
messages (subscription_expiring / subscription_expired) are matched daily
against each template's days_offset:

    a template fires on the Brazil day ``expiry + days_offset``

so -3 fires three days before expiry and +2 two days after it.
"""
from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime, timedelta, timezone
from typing import DefaultDict, Dict, List, Optional, Tuple
from urllib.parse import quote

import jwt
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from descomplicar.config import get_settings
from descomplicar.models import (
    EXPIRATION_TRIGGERS,
    Account,
    NotificationTemplate,
    NotificationTrigger,
    Subscription,
    User,
)
from descomplicar.notifications.dispatcher import TemplateDispatcher
from descomplicar.notifications.email import EmailSender
from descomplicar.notifications.push import PushSender
from descomplicar.utils.frontend_url import get_frontend_url
from descomplicar.utils.template_variables import TemplateFacts, build_template_context
from descomplicar.utils.timezone import get_brazil_date, to_brazil_date

RESET_TOKEN_TTL = timedelta(hours=1)


def build_reset_password_link(user_id: int, base_url: Optional[str] = None) -> str:
    """Reset-password link with a valid token (same path as forgot-password)."""
    settings = get_settings()
    payload = {
        "userId": user_id,
        "purpose": "password_reset",
        "exp": datetime.now(timezone.utc) + RESET_TOKEN_TTL,
    }
    token = jwt.encode(payload, settings.jwt_secret, algorithm="HS256")
    return f"{base_url or get_frontend_url()}/reset-password?token={quote(token, safe='')}"


def _live_subscriptions(account: Account) -> List[Subscription]:
    return [s for s in account.subscriptions if s.deleted_at is None]


def _latest_subscription(account: Account) -> Optional[Subscription]:
    subs = _live_subscriptions(account)
    if not subs:
        return None
    return max(subs, key=lambda s: (s.end_date is not None, s.end_date or s.start_date))


def get_account_expiration_date(account: Account) -> Optional[datetime]:
    """Effective expiry: trial end, else the latest subscription end date."""
    if account.trial_ends_at is not None:
        return account.trial_ends_at
    ends = [s.end_date for s in _live_subscriptions(account) if s.end_date is not None]
    return max(ends) if ends else None


def target_expiry_date(today: date, days_offset: int) -> date:
    """Expiry day of the accounts a template with this offset fires for today."""
    return today - timedelta(days=days_offset)


def _account_facts(
    account: Account, expiration: Optional[datetime], platform_url: str
) -> TemplateFacts:
    subscription = _latest_subscription(account)
    plan_name = subscription.plan.name if subscription and subscription.plan else None
    return TemplateFacts(
        user_name=account.user.name,
        expiration_date=expiration,
        plan_name=plan_name,
        account_status=account.status,
        reset_password_link=build_reset_password_link(account.user.id, platform_url),
        platform_url=platform_url,
    )


class ExpirationTriggerService:
    """Daily scan for accounts reaching a template's expiry offset."""

    def __init__(
        self,
        session: Session,
        email_sender: Optional[EmailSender] = None,
        push_sender: Optional[PushSender] = None,
        platform_url: Optional[str] = None,
    ):
        self.session = session
        self.settings = get_settings()
        self.dispatcher = TemplateDispatcher(session, email_sender, push_sender)
        self.platform_url = platform_url or get_frontend_url()

    def load_templates(self) -> List[NotificationTemplate]:
        return (
            self.session.query(NotificationTemplate)
            .filter(
                NotificationTemplate.trigger.in_(EXPIRATION_TRIGGERS),
                NotificationTemplate.active.is_(True),
                NotificationTemplate.deleted_at.is_(None),
                NotificationTemplate.days_offset.is_not(None),
            )
            .order_by(NotificationTemplate.id)
            .all()
        )

    def load_accounts(self) -> List[Account]:
        return (
            self.session.query(Account)
            .join(Account.user)
            .options(
                selectinload(Account.user),
                selectinload(Account.subscriptions).selectinload(Subscription.plan),
                selectinload(Account.push_subscriptions),
            )
            .filter(Account.deleted_at.is_(None), User.deleted_at.is_(None))
            .order_by(Account.id)
            .all()
        )

    @staticmethod
    def index_by_expiry(
        accounts: List[Account],
    ) -> Dict[date, List[Tuple[Account, datetime]]]:
        """Group accounts by the Brazil day of their effective expiry."""
        index: DefaultDict[date, List[Tuple[Account, datetime]]] = defaultdict(list)
        for account in accounts:
            expiration = get_account_expiration_date(account)
            day = to_brazil_date(expiration)
            if day is not None:
                index[day].append((account, expiration))
        return index

    def run(self, today: Optional[date] = None) -> Dict[str, int]:
        """Run one scan. Store errors propagate; send errors are per account.

        Returns:
            Counters: matched, sent, skipped (already sent today), failed.
        """
        if not self.settings.notification_enabled:
            logger.info("Notifications are disabled, skipping expiration triggers")
            return {}

        today = today or get_brazil_date()
        results = {"matched": 0, "sent": 0, "skipped": 0, "failed": 0}

        templates = self.load_templates()
        if not templates:
            logger.info("No active expiration templates found")
            return results

        by_expiry = self.index_by_expiry(self.load_accounts())

        for template in templates:
            target = target_expiry_date(today, template.days_offset)
            matches = by_expiry.get(target, [])
            logger.debug(
                f"Template {template.id} ({template.trigger.value}, "
                f"offset {template.days_offset}): {len(matches)} accounts expiring {target}"
            )

            for account, expiration in matches:
                results["matched"] += 1
                try:
                    if self.dispatcher.already_sent(template, account.id, today):
                        results["skipped"] += 1
                        continue

                    context = build_template_context(
                        _account_facts(account, expiration, self.platform_url)
                    )
                    sent = self.dispatcher.send(
                        template, account.user, account, context, today
                    )
                    results["sent" if sent else "failed"] += 1
                except SQLAlchemyError:
                    # Store failures abort the whole run
                    self.session.rollback()
                    raise
                except Exception as e:
                    self.session.rollback()
                    results["failed"] += 1
                    logger.error(
                        f"Error sending template {template.id} to account {account.id}: {e}"
                    )

        logger.info(f"Expiration triggers for {today}: {results}")
        return results


def execute_welcome_trigger(
    session: Session,
    user_id: int,
    email_sender: Optional[EmailSender] = None,
    push_sender: Optional[PushSender] = None,
    platform_url: Optional[str] = None,
) -> int:
    """Send every active welcome template to a newly created user.

    Logs errors and never raises. Returns the number of delivered templates.
    """
    try:
        user = (
            session.query(User)
            .filter(User.id == user_id, User.deleted_at.is_(None))
            .first()
        )
        if user is None or not user.email:
            logger.warning(f"Welcome trigger: user {user_id} not found or has no email")
            return 0

        templates = (
            session.query(NotificationTemplate)
            .filter(
                NotificationTemplate.trigger == NotificationTrigger.welcome,
                NotificationTemplate.active.is_(True),
                NotificationTemplate.deleted_at.is_(None),
            )
            .order_by(NotificationTemplate.updated_at.desc())
            .all()
        )
    except Exception as e:
        logger.error(f"Welcome trigger: failed to load user {user_id}: {e}")
        return 0

    if not templates:
        logger.debug("No active welcome templates found")
        return 0

    account = next((a for a in user.accounts if a.deleted_at is None), None)
    platform_url = platform_url or get_frontend_url()
    subscription = _latest_subscription(account) if account else None
    context = build_template_context(
        TemplateFacts(
            user_name=user.name,
            expiration_date=get_account_expiration_date(account) if account else None,
            plan_name=subscription.plan.name if subscription and subscription.plan else None,
            account_status=account.status if account else None,
            reset_password_link=build_reset_password_link(user.id, platform_url),
            platform_url=platform_url,
        )
    )

    dispatcher = TemplateDispatcher(session, email_sender, push_sender)
    today = get_brazil_date()
    delivered = 0
    for template in templates:
        try:
            if dispatcher.send(template, user, account, context, today, log_failures=True):
                delivered += 1
        except Exception as e:
            session.rollback()
            logger.error(
                f"Welcome trigger: template {template.id} ({template.channel.value}) "
                f"for user {user_id} failed: {e}"
            )

    return delivered
