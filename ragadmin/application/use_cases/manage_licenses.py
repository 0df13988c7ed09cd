"""Manage Licenses Use Case.

Creating a license is a two-step transaction: one create call, then one
attach call per selected knowledge base, issued concurrently. The create call
decides success; failed attachments downgrade the result to a partial success.
"""

from dataclasses import dataclass, field
import asyncio
import logging

from rag_admin_sdk import (
    AsyncRagAdminClient,
    AttachKnowledgeBaseRequest,
    CreateLicenseRequest,
    KnowledgeBase,
    License,
    RagAdminError,
    User,
)

from ragadmin.application.results import (
    StepResult,
    StepStatus,
    WorkflowResult,
    describe_error,
)
from ragadmin.ports.notifier import NotifierPort

logger = logging.getLogger(__name__)


@dataclass
class LicenseForm:
    """State of the "create license" dialog."""

    user_id: str = ""
    validity_days: int | None = None
    knowledge_base_ids: list[str] = field(default_factory=list)


class LicenseManagement:
    """Licenses page: list, create (with attachments), activate/deactivate."""

    def __init__(self, client: AsyncRagAdminClient, notifier: NotifierPort):
        self.client = client
        self.notifier = notifier
        self.licenses: list[License] = []
        self.users: list[User] = []
        self.knowledge_bases: list[KnowledgeBase] = []
        self.form = LicenseForm()
        self.is_loading = True

    async def load(self) -> bool:
        """Reload licenses, users and knowledge bases concurrently."""
        try:
            licenses, users, knowledge_bases = await asyncio.gather(
                self.client.list_licenses(),
                self.client.list_users(),
                self.client.list_knowledge_bases(),
            )
        except RagAdminError as e:
            self.notifier.error(describe_error(e, "Failed to load data"))
            return False
        finally:
            self.is_loading = False

        self.licenses = licenses
        self.users = users
        self.knowledge_bases = knowledge_bases
        return True

    def toggle_knowledge_base(self, kb_id: str) -> None:
        if kb_id in self.form.knowledge_base_ids:
            self.form.knowledge_base_ids.remove(kb_id)
        else:
            self.form.knowledge_base_ids.append(kb_id)

    def reset_form(self) -> None:
        self.form = LicenseForm()

    @staticmethod
    def build_request(form: LicenseForm) -> CreateLicenseRequest:
        """Validity is only sent when it is a positive number of days."""
        fields: dict = {"user_id": form.user_id}
        if form.validity_days is not None and form.validity_days > 0:
            fields["validity_period_days"] = form.validity_days
        return CreateLicenseRequest(**fields)

    async def create_license(self, form: LicenseForm | None = None) -> WorkflowResult[License]:
        form = form or self.form
        if not form.user_id:
            self.notifier.error("Please select a user")
            return WorkflowResult.rejected("Please select a user")

        try:
            license = await self.client.create_license(self.build_request(form))
        except RagAdminError as e:
            message = describe_error(e, "Failed to create license")
            self.notifier.error(message)
            return WorkflowResult.failed(e, message)

        kb_ids = list(form.knowledge_base_ids)
        secondary = await self._attach_all(license, kb_ids)

        if secondary.failed_step:
            self.notifier.partial_success(secondary.message or "License created")
        else:
            suffix = (
                f" with {len(kb_ids)} knowledge base(s) attached" if kb_ids else ""
            )
            self.notifier.success(f"License created successfully{suffix}")

        self.reset_form()
        await self.load()
        return WorkflowResult(primary=StepResult.ok(), secondary=secondary, value=license)

    async def _attach_all(self, license: License, kb_ids: list[str]) -> StepResult:
        if not kb_ids:
            return StepResult.skipped()

        results = await asyncio.gather(
            *(
                self.client.attach_knowledge_base(
                    AttachKnowledgeBaseRequest(kb_id=kb_id, license_id=license.id)
                )
                for kb_id in kb_ids
            ),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException) and not isinstance(result, RagAdminError):
                raise result

        errors = [r for r in results if isinstance(r, RagAdminError)]
        if not errors:
            return StepResult.ok()

        for kb_id, result in zip(kb_ids, results):
            if isinstance(result, RagAdminError):
                logger.warning(f"Attaching knowledge base {kb_id} to {license.id} failed: {result}")

        message = (
            f"License created but {len(errors)} of {len(kb_ids)} knowledge base "
            f"attachment(s) failed: {describe_error(errors[0], 'Attach error')}"
        )
        if len(errors) == len(kb_ids):
            return StepResult(StepStatus.ERROR, message, errors)
        return StepResult.partially_failed(errors, message)

    async def toggle_license(self, license: License) -> WorkflowResult[License]:
        """Deactivate an active license, activate an inactive one."""
        try:
            if license.is_active:
                updated = await self.client.deactivate_license(license.id)
                self.notifier.success("License deactivated")
            else:
                updated = await self.client.activate_license(license.id)
                self.notifier.success("License activated")
        except RagAdminError as e:
            message = describe_error(e, "Failed to update license")
            self.notifier.error(message)
            return WorkflowResult.failed(e, message)

        await self.load()
        return WorkflowResult(primary=StepResult.ok(), value=updated)
