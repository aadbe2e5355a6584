from unittest.mock import MagicMock

from descomplicar.notifications.formatter import (
    html_to_text,
    looks_like_html,
    render_email,
    render_push,
)


def _make_template(subject=None, title=None, body=""):
    template = MagicMock()
    template.subject = subject
    template.title = title
    template.body = body
    return template


class TestHtmlToText:
    def test_strips_tags_and_collapses_whitespace(self):
        assert html_to_text("<p>Olá   <b>Ana</b></p>\n<p>Tchau</p>") == "Olá Ana Tchau"

    def test_detection(self):
        assert looks_like_html("<p>x</p>")
        assert not looks_like_html("a > b")
        assert not looks_like_html("plain")


class TestRenderEmail:
    def test_plain_body(self):
        rendered = render_email(
            _make_template(subject="Oi {{nome_usuario}}", body="Vence {{data_vencimento}}"),
            {"nome_usuario": "Ana", "data_vencimento": "13/06/2025"},
        )
        assert rendered.subject == "Oi Ana"
        assert rendered.text == "Vence 13/06/2025"
        assert rendered.html is None

    def test_html_body_has_text_fallback(self):
        rendered = render_email(
            _make_template(subject=None, body="<p>Oi {{nome_usuario}}</p>"),
            {"nome_usuario": "Ana"},
        )
        assert rendered.subject == ""
        assert rendered.html == "<p>Oi Ana</p>"
        assert rendered.text == "Oi Ana"


class TestRenderPush:
    def test_payload(self):
        rendered = render_push(
            _make_template(title="{{nome_usuario}}", body="{{link_planos}}"),
            {"nome_usuario": "Ana", "link_planos": "https://app.test/planos"},
        )
        assert rendered.as_payload() == {"title": "Ana", "body": "https://app.test/planos"}

    def test_missing_title(self):
        rendered = render_push(_make_template(title=None, body="x"), {})
        assert rendered.title == ""
