"""Tests for the AI configuration workflow."""

import pytest

from rag_admin_sdk import LLMProvider

from ragadmin.application.results import WorkflowOutcome
from ragadmin.application.use_cases import AIConfigurationManagement
from ragadmin.tests.factories import make_config, server_error


@pytest.fixture
def page(client, notifier):
    client.get_ai_configuration.return_value = make_config(model="gpt-4o", temperature=0.2)
    return AIConfigurationManagement(client, notifier)


class TestDraft:
    """Tests for draft editing."""

    @pytest.mark.asyncio
    async def test_untouched_fields_are_not_sent(self, client, page):
        """Test only touched fields reach the request."""
        await page.load()
        page.set_field("temperature", 0.7)

        assert page.build_request().to_payload() == {"temperature": 0.7}

    @pytest.mark.asyncio
    async def test_cleared_field_is_null(self, page):
        await page.load()
        page.clear_field("model")

        assert page.build_request().to_payload() == {"model": None}

    def test_unknown_field(self, page):
        with pytest.raises(ValueError):
            page.set_field("seed", 1)

    def test_provider_cannot_be_cleared(self, page):
        with pytest.raises(ValueError):
            page.clear_field("llm_provider")

    @pytest.mark.asyncio
    async def test_provider_coerced_and_applicability(self, page):
        await page.load()
        page.set_field("llm_provider", "GEMINI")

        assert page.provider == LLMProvider.GEMINI
        assert "top_k" in page.applicable_parameters()
        assert "frequency_penalty" not in page.applicable_parameters()

    @pytest.mark.asyncio
    async def test_inapplicable_fields(self, page):
        await page.load()
        page.set_field("top_k", 40)
        page.clear_field("frequency_penalty")

        assert page.inapplicable_fields() == ["top_k"]


class TestSave:
    """Tests for saving."""

    @pytest.mark.asyncio
    async def test_requires_loaded_configuration(self, client, notifier):
        client.get_ai_configuration.side_effect = server_error()
        page = AIConfigurationManagement(client, notifier)
        await page.load()

        result = await page.save()

        assert result.outcome == WorkflowOutcome.REJECTED
        assert notifier.last.description == "No configuration found"
        client.update_ai_configuration.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_adopts_server_response(self, client, notifier, page):
        """Test local state is replaced by what the server returns."""
        client.update_ai_configuration.return_value = make_config(
            model="gpt-4o-mini", temperature=0.5
        )
        await page.load()
        page.set_field("temperature", 0.7)

        result = await page.save()

        assert result.outcome == WorkflowOutcome.SUCCESS
        assert page.config.temperature == 0.5
        assert page.config.model == "gpt-4o-mini"
        assert page.draft == {}
        assert notifier.last.description == "Configuration updated successfully"

    @pytest.mark.asyncio
    async def test_inapplicable_fields_warn_but_send(self, client, notifier, page):
        client.update_ai_configuration.return_value = make_config()
        await page.load()
        page.set_field("top_k", 40)

        await page.save()

        assert notifier.titles() == ["Warning", "Success"]
        request = client.update_ai_configuration.await_args.args[0]
        assert request.to_payload() == {"topK": 40}

    @pytest.mark.asyncio
    async def test_failure_keeps_draft(self, client, notifier, page):
        client.update_ai_configuration.side_effect = server_error()
        await page.load()
        page.set_field("temperature", 0.9)

        result = await page.save()

        assert result.outcome == WorkflowOutcome.FAILURE
        assert page.draft == {"temperature": 0.9}
        assert page.config.temperature == 0.2
        assert notifier.last.description == "Failed to update configuration"

    @pytest.mark.asyncio
    async def test_load_failure(self, client, notifier):
        client.get_ai_configuration.side_effect = server_error()
        page = AIConfigurationManagement(client, notifier)

        assert await page.load() is False
        assert notifier.last.description == "Failed to load configuration"
        assert page.is_loading is False
