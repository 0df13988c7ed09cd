"""Manage AI Configuration Use Case.

The configuration is a global singleton. Edits accumulate in a draft; saving
transmits only the fields the operator touched (cleared fields as null) and
then adopts the object the server returns.
"""

from typing import Any
import logging

from rag_admin_sdk import (
    AIConfiguration,
    AsyncRagAdminClient,
    LLMProvider,
    PROVIDER_PARAMETERS,
    RagAdminError,
    UpdateAIConfigRequest,
)
from rag_admin_sdk.models import ParameterSpec

from ragadmin.application.results import StepResult, WorkflowResult, describe_error
from ragadmin.ports.notifier import NotifierPort

logger = logging.getLogger(__name__)

CONFIG_FIELDS = tuple(UpdateAIConfigRequest.model_fields)


class AIConfigurationManagement:
    """Configuration page: load, edit a draft, save."""

    def __init__(self, client: AsyncRagAdminClient, notifier: NotifierPort):
        self.client = client
        self.notifier = notifier
        self.config: AIConfiguration | None = None
        self.draft: dict[str, Any] = {}
        self.is_loading = True

    async def load(self) -> bool:
        try:
            self.config = await self.client.get_ai_configuration()
        except RagAdminError as e:
            self.notifier.error(describe_error(e, "Failed to load configuration"))
            return False
        finally:
            self.is_loading = False
        self.draft = {}
        return True

    def set_field(self, name: str, value: Any) -> None:
        if name not in CONFIG_FIELDS:
            raise ValueError(f"Unknown configuration field: {name}")
        if name == "llm_provider" and value is not None:
            value = LLMProvider(value)
        self.draft[name] = value

    def clear_field(self, name: str) -> None:
        """Mark a field as explicitly cleared; it is sent as null."""
        if name == "llm_provider":
            raise ValueError("llm_provider cannot be cleared")
        self.set_field(name, None)

    def discard_changes(self) -> None:
        self.draft = {}

    @property
    def provider(self) -> LLMProvider | None:
        if self.draft.get("llm_provider") is not None:
            return self.draft["llm_provider"]
        return self.config.llm_provider if self.config else None

    def applicable_parameters(self) -> dict[str, ParameterSpec]:
        if self.provider is None:
            return {}
        return PROVIDER_PARAMETERS[self.provider]

    def inapplicable_fields(self) -> list[str]:
        """Draft values the selected provider does not use."""
        applicable = self.applicable_parameters()
        return [
            name
            for name, value in self.draft.items()
            if name != "llm_provider" and value is not None and name not in applicable
        ]

    def build_request(self) -> UpdateAIConfigRequest:
        return UpdateAIConfigRequest(**self.draft)

    async def save(self) -> WorkflowResult[AIConfiguration]:
        if self.config is None:
            self.notifier.error("No configuration found")
            return WorkflowResult.rejected("No configuration found")

        ignored = self.inapplicable_fields()
        if ignored:
            self.notifier.warning(
                f"{', '.join(ignored)} not used by {self.provider.value}; "
                "the values are sent but the provider will ignore them"
            )

        try:
            updated = await self.client.update_ai_configuration(self.build_request())
        except RagAdminError as e:
            message = describe_error(e, "Failed to update configuration")
            self.notifier.error(message)
            return WorkflowResult.failed(e, message)

        self.config = updated
        self.draft = {}
        self.notifier.success("Configuration updated successfully")
        return WorkflowResult(primary=StepResult.ok(), value=updated)
