from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from descomplicar.models.notification_template import NotificationTemplate
from descomplicar.utils.template_variables import TemplateContext, replace_template_variables

_HTML_TAG = re.compile(r"<[^>]+>")
_WHITESPACE = re.compile(r"\s+")


def looks_like_html(body: str) -> bool:
    return "<" in body and ">" in body


def html_to_text(body: str) -> str:
    """Plain text fallback for an HTML body."""
    return _WHITESPACE.sub(" ", _HTML_TAG.sub(" ", body)).strip()


@dataclass(frozen=True)
class RenderedEmail:
    subject: str
    text: str
    html: Optional[str] = None


@dataclass(frozen=True)
class RenderedPush:
    title: str
    body: str

    def as_payload(self) -> dict:
        return {"title": self.title, "body": self.body}


def render_email(template: NotificationTemplate, context: TemplateContext) -> RenderedEmail:
    subject = replace_template_variables(template.subject or "", context)
    body = replace_template_variables(template.body, context)
    if looks_like_html(body):
        return RenderedEmail(subject=subject, text=html_to_text(body), html=body)
    return RenderedEmail(subject=subject, text=body)


def render_push(template: NotificationTemplate, context: TemplateContext) -> RenderedPush:
    return RenderedPush(
        title=replace_template_variables(template.title or "", context),
        body=replace_template_variables(template.body, context),
    )
