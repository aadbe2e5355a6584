from __future__ import annotations

from datetime import date
from typing import List, Optional

from loguru import logger
from sqlalchemy.orm import Session

from descomplicar.models import (
    Account,
    EmailLog,
    NotificationTemplate,
    NotificationTemplateUsageLog,
    TemplateChannel,
    User,
)
from descomplicar.notifications.email import EmailSender
from descomplicar.notifications.formatter import render_email, render_push
from descomplicar.notifications.push import PushSender
from descomplicar.utils.template_variables import TemplateContext


class TemplateDispatcher:
    """Sends rendered notification templates and keeps the usage log."""

    def __init__(
        self,
        session: Session,
        email_sender: Optional[EmailSender] = None,
        push_sender: Optional[PushSender] = None,
    ):
        self.session = session
        self._email_sender = email_sender
        self._push_sender = push_sender

    @property
    def email_sender(self) -> EmailSender:
        if self._email_sender is None:
            self._email_sender = EmailSender()
        return self._email_sender

    @property
    def push_sender(self) -> PushSender:
        # Raises PushNotConfiguredError when VAPID keys are missing
        if self._push_sender is None:
            self._push_sender = PushSender()
        return self._push_sender

    def already_sent(
        self, template: NotificationTemplate, account_id: int, trigger_date: date
    ) -> bool:
        """Check if this template was delivered to the account on that day."""
        exists = (
            self.session.query(NotificationTemplateUsageLog.id)
            .filter_by(
                template_id=template.id,
                account_id=account_id,
                trigger_date=trigger_date,
                success=True,
            )
            .first()
        )
        return exists is not None

    def _log_usage(
        self,
        template: NotificationTemplate,
        account_id: Optional[int],
        recipient_info: str,
        trigger_date: date,
        success: bool,
        error_message: Optional[str] = None,
    ) -> None:
        self.session.add(
            NotificationTemplateUsageLog(
                template_id=template.id,
                trigger=template.trigger,
                channel=template.channel,
                account_id=account_id,
                recipient_info=recipient_info,
                trigger_date=trigger_date,
                success=success,
                error_message=error_message,
            )
        )

    def send(
        self,
        template: NotificationTemplate,
        user: User,
        account: Optional[Account],
        context: TemplateContext,
        trigger_date: date,
        log_failures: bool = False,
    ) -> bool:
        """Render and send one template to one recipient.

        Args:
            template: Template to send; its channel picks the sender.
            user: Recipient user (email address).
            account: Recipient account (push subscriptions, usage log key).
            context: Variables for rendering.
            trigger_date: Day recorded in the usage log.
            log_failures: Also write usage-log rows for failed sends.

        Returns:
            True if delivered through the template's channel.
        """
        if template.channel == TemplateChannel.email:
            success, error = self._send_email(template, user, context)
            recipient_info = f"{user.name} <{user.email}>"
        elif template.channel == TemplateChannel.pwa:
            if account is None:
                logger.warning(f"Template {template.id}: PWA send without account, skipping")
                return False
            success, error = self._send_push(template, account, context)
            recipient_info = f"account:{account.id}"
        else:
            logger.warning(f"Template {template.id}: unsupported channel {template.channel}")
            return False

        if success or log_failures:
            self._log_usage(
                template,
                account.id if account is not None else None,
                recipient_info,
                trigger_date,
                success,
                error,
            )
        self.session.commit()

        if success:
            logger.info(
                f"{template.channel.value}: sent {template.trigger.value} "
                f"template {template.id} to {recipient_info}"
            )
        else:
            logger.warning(
                f"{template.channel.value}: failed {template.trigger.value} "
                f"template {template.id} to {recipient_info}: {error}"
            )
        return success

    def _send_email(self, template, user, context):
        rendered = render_email(template, context)
        result = self.email_sender.send(user.email, rendered.subject, rendered.text, rendered.html)
        self.session.add(
            EmailLog(
                to=user.email,
                subject=rendered.subject,
                status="success" if result.sent else "error",
                error_message=result.error,
                origin="trigger",
                template_id=template.id,
            )
        )
        return result.sent, result.error

    def _send_push(self, template, account, context):
        subscriptions = list(account.push_subscriptions)
        if not subscriptions:
            return False, "no push subscriptions"

        payload = render_push(template, context).as_payload()
        sender = self.push_sender
        results: List[bool] = [
            sender.send(sub.to_subscription_info(), payload) for sub in subscriptions
        ]
        delivered = sum(results)
        if delivered == 0:
            return False, f"0/{len(results)} push subscriptions delivered"
        return True, None
