from datetime import date, datetime

from descomplicar.utils.template_variables import (
    TEMPLATE_VARIABLES,
    TemplateFacts,
    VehicleFacts,
    build_template_context,
    replace_template_variables,
)


class TestBuildTemplateContext:
    def test_no_facts_yields_empty_strings(self):
        ctx = build_template_context(TemplateFacts())

        assert set(ctx) == set(TEMPLATE_VARIABLES)
        assert all(value == "" for value in ctx.values())

    def test_default_argument(self):
        assert build_template_context() == build_template_context(TemplateFacts())

    def test_expiration_date_string_uses_date_part(self):
        ctx = build_template_context(TemplateFacts(expiration_date="2025-03-15T00:00:00Z"))
        assert ctx["data_vencimento"] == "15/03/2025"

    def test_expiration_datetime_converted_to_brazil_time(self):
        # 02:00 UTC is still the previous day in UTC-3
        ctx = build_template_context(
            TemplateFacts(expiration_date=datetime(2025, 3, 16, 2, 0))
        )
        assert ctx["data_vencimento"] == "15/03/2025"

    def test_expiration_plain_date(self):
        ctx = build_template_context(TemplateFacts(expiration_date=date(2025, 1, 2)))
        assert ctx["data_vencimento"] == "02/01/2025"

    def test_invalid_expiration_date_is_empty(self):
        ctx = build_template_context(TemplateFacts(expiration_date="not a date"))
        assert ctx["data_vencimento"] == ""

    def test_vehicle_descriptor(self):
        ctx = build_template_context(
            TemplateFacts(vehicle=VehicleFacts(brand="Fiat", model="Uno", year=2012))
        )
        assert ctx["veiculo"] == "Fiat Uno 2012"

    def test_status_labels(self):
        ctx = build_template_context(
            TemplateFacts(checklist_status="in_progress", account_status="vencido")
        )
        assert ctx["estado_checklist"] == "Em andamento"
        assert ctx["status_usuario"] == "Vencido"

    def test_unknown_status_passes_through(self):
        ctx = build_template_context(
            TemplateFacts(checklist_status="archived", account_status="suspended")
        )
        assert ctx["estado_checklist"] == "archived"
        assert ctx["status_usuario"] == "suspended"

    def test_reset_link_aliases_match(self):
        link = "https://app.example.com/reset-password?token=abc"
        ctx = build_template_context(TemplateFacts(reset_password_link=link))
        assert ctx["link_recuperar_senha"] == link
        assert ctx["link_reset_senha"] == link

    def test_platform_links(self):
        ctx = build_template_context(TemplateFacts(platform_url="https://app.example.com/"))
        assert ctx["link_plataforma"] == "https://app.example.com"
        assert ctx["link_planos"] == "https://app.example.com/planos"

    def test_plain_facts(self):
        ctx = build_template_context(
            TemplateFacts(
                user_name="Ana",
                client_name="Carlos",
                plan_name="Pro",
                offer_name="Black Friday",
            )
        )
        assert ctx["nome_usuario"] == "Ana"
        assert ctx["nome_cliente"] == "Carlos"
        assert ctx["nome_plano"] == "Pro"
        assert ctx["nome_oferta"] == "Black Friday"


class TestReplaceTemplateVariables:
    def test_text_without_placeholders_unchanged(self):
        ctx = build_template_context(TemplateFacts(user_name="Ana"))
        text = "Olá, tudo bem? {não é variável}"
        assert replace_template_variables(text, ctx) == text

    def test_replaces_all_occurrences(self):
        ctx = build_template_context(TemplateFacts(user_name="Ana"))
        result = replace_template_variables("{{nome_usuario}} - {{nome_usuario}}", ctx)
        assert result == "Ana - Ana"

    def test_unknown_placeholder_left_untouched(self):
        ctx = build_template_context(TemplateFacts(user_name="Ana"))
        result = replace_template_variables("{{nome_usuario}} {{cupom}}", ctx)
        assert result == "Ana {{cupom}}"

    def test_absent_fact_renders_empty(self):
        ctx = build_template_context(TemplateFacts())
        assert replace_template_variables("[{{nome_plano}}]", ctx) == "[]"

    def test_multiple_variables(self):
        ctx = build_template_context(
            TemplateFacts(
                user_name="Ana",
                expiration_date="2025-06-13",
                platform_url="https://app.example.com",
            )
        )
        text = "{{nome_usuario}}, vence em {{data_vencimento}}. Planos: {{link_planos}}"
        assert replace_template_variables(text, ctx) == (
            "Ana, vence em 13/06/2025. Planos: https://app.example.com/planos"
        )
