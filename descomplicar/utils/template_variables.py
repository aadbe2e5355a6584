"""Variable substitution for notification templates.

Available variables: nome_usuario, nome_cliente, veiculo, estado_checklist,
data_vencimento, link_plataforma, link_planos, link_recuperar_senha,
link_reset_senha, nome_plano, nome_oferta, status_usuario.

``link_recuperar_senha`` and ``link_reset_senha`` are the same link: the
reset-password URL carrying a token.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from descomplicar.utils.timezone import DateLike, to_brazil_date

TEMPLATE_VARIABLES = (
    "nome_usuario",
    "nome_cliente",
    "veiculo",
    "estado_checklist",
    "data_vencimento",
    "link_plataforma",
    "link_planos",
    "link_recuperar_senha",
    "link_reset_senha",
    "nome_plano",
    "nome_oferta",
    "status_usuario",
)

CHECKLIST_STATUS_LABELS = {
    "pending": "Pendente",
    "in_progress": "Em andamento",
    "completed": "Concluído",
}

ACCOUNT_STATUS_LABELS = {
    "active": "Ativo",
    "inactive": "Inativo",
    "trial": "Trial",
    "cancelled": "Cancelado",
    "vencido": "Vencido",
}

TemplateContext = Dict[str, str]


@dataclass(frozen=True)
class VehicleFacts:
    brand: str
    model: str
    year: int


@dataclass(frozen=True)
class TemplateFacts:
    """Facts known when a notification is sent. Pass only what exists."""

    user_name: Optional[str] = None
    client_name: Optional[str] = None
    vehicle: Optional[VehicleFacts] = None
    checklist_status: Optional[str] = None
    expiration_date: Optional[DateLike] = None
    plan_name: Optional[str] = None
    offer_name: Optional[str] = None
    account_status: Optional[str] = None
    # Full link with token (password recovery)
    reset_password_link: Optional[str] = None
    platform_url: Optional[str] = None


def format_date_br(value: Optional[DateLike]) -> str:
    day = to_brazil_date(value)
    if day is None:
        return ""
    return day.strftime("%d/%m/%Y")


def checklist_status_label(status: str) -> str:
    return CHECKLIST_STATUS_LABELS.get(status, status)


def account_status_label(status: str) -> str:
    return ACCOUNT_STATUS_LABELS.get(status, status)


def build_template_context(facts: Optional[TemplateFacts] = None) -> TemplateContext:
    """Build the variable context; every known variable maps to a string."""
    if facts is None:
        facts = TemplateFacts()

    vehicle = ""
    if facts.vehicle is not None:
        vehicle = f"{facts.vehicle.brand} {facts.vehicle.model} {facts.vehicle.year}"

    platform_url = (facts.platform_url or "").rstrip("/")
    reset_link = facts.reset_password_link or ""

    return {
        "nome_usuario": facts.user_name or "",
        "nome_cliente": facts.client_name or "",
        "veiculo": vehicle,
        "estado_checklist": (
            checklist_status_label(facts.checklist_status)
            if facts.checklist_status is not None
            else ""
        ),
        "data_vencimento": format_date_br(facts.expiration_date),
        "link_plataforma": platform_url,
        "link_planos": f"{platform_url}/planos" if platform_url else "",
        "link_recuperar_senha": reset_link,
        "link_reset_senha": reset_link,
        "nome_plano": facts.plan_name or "",
        "nome_oferta": facts.offer_name or "",
        "status_usuario": (
            account_status_label(facts.account_status)
            if facts.account_status is not None
            else ""
        ),
    }


def replace_template_variables(text: str, context: TemplateContext) -> str:
    """Replace every ``{{variable}}`` of the known set; leave anything else as is."""
    result = text
    for key in TEMPLATE_VARIABLES:
        result = result.replace(f"{{{{{key}}}}}", context.get(key) or "")
    return result
