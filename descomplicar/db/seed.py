from loguru import logger
from sqlalchemy.orm import Session

from descomplicar.db.database import Base, get_sync_session
from descomplicar.models import NotificationTemplate, NotificationTrigger, TemplateChannel

DEFAULT_TEMPLATES = [
    {
        "name": "Boas-vindas (email)",
        "trigger": NotificationTrigger.welcome,
        "channel": TemplateChannel.email,
        "days_offset": None,
        "subject": "Bem-vindo, {{nome_usuario}}!",
        "body": (
            "<p>Olá {{nome_usuario}},</p>"
            "<p>Sua conta foi criada. Defina sua senha em "
            '<a href="{{link_reset_senha}}">{{link_reset_senha}}</a>.</p>'
            "<p>Acesse: {{link_plataforma}}</p>"
        ),
    },
    {
        "name": "Vencimento em 3 dias (email)",
        "trigger": NotificationTrigger.subscription_expiring,
        "channel": TemplateChannel.email,
        "days_offset": -3,
        "subject": "Seu acesso vence em {{data_vencimento}}",
        "body": (
            "Olá {{nome_usuario}}, seu plano {{nome_plano}} vence em "
            "{{data_vencimento}}. Renove em {{link_planos}}."
        ),
    },
    {
        "name": "Vencimento amanhã (push)",
        "trigger": NotificationTrigger.subscription_expiring,
        "channel": TemplateChannel.pwa,
        "days_offset": -1,
        "title": "Seu acesso vence amanhã",
        "body": "Renove seu plano para continuar usando a plataforma.",
    },
    {
        "name": "Vencido há 1 dia (push)",
        "trigger": NotificationTrigger.subscription_expired,
        "channel": TemplateChannel.pwa,
        "days_offset": 1,
        "title": "Seu acesso venceu",
        "body": "Seu acesso venceu em {{data_vencimento}}. Veja os planos.",
    },
    {
        "name": "Vencido há 3 dias (email)",
        "trigger": NotificationTrigger.subscription_expired,
        "channel": TemplateChannel.email,
        "days_offset": 3,
        "subject": "Sentimos sua falta, {{nome_usuario}}",
        "body": (
            "Seu acesso venceu em {{data_vencimento}}. "
            "Escolha um plano em {{link_planos}} para voltar."
        ),
    },
]


def seed_templates(session: Session) -> int:
    """Create the default notification templates. Existing names are kept."""
    created = 0
    for template_data in DEFAULT_TEMPLATES:
        existing = (
            session.query(NotificationTemplate)
            .filter_by(name=template_data["name"])
            .first()
        )
        if not existing:
            session.add(NotificationTemplate(**template_data))
            created += 1
            logger.info(f"Added template: {template_data['name']}")
        else:
            logger.info(f"Template already exists: {template_data['name']}")

    session.commit()
    logger.info("Seed completed")
    return created


def seed_default_templates() -> int:
    with get_sync_session() as session:
        Base.metadata.create_all(session.get_bind())
        return seed_templates(session)


if __name__ == "__main__":
    seed_default_templates()
