"""Manage Knowledge Bases Use Case.

Create and update are two-step transactions: the metadata call is the primary
step, the optional document upload (all selected files in one request) is the
secondary step. An upload failure after a successful metadata call is a
partial success: the knowledge base exists but its documents are incomplete.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable
import asyncio
import logging

from rag_admin_sdk import (
    AsyncRagAdminClient,
    AttachKnowledgeBaseRequest,
    CreateKnowledgeBaseRequest,
    FileBlob,
    FileSelection,
    KnowledgeBase,
    License,
    RagAdminError,
    UpdateKnowledgeBaseRequest,
    filter_pdf_files,
)

from ragadmin.application.results import StepResult, WorkflowResult, describe_error
from ragadmin.ports.notifier import NotifierPort

logger = logging.getLogger(__name__)

NON_PDF_WARNING = "Only PDF files are supported. Non-PDF files were filtered out."


@dataclass
class KnowledgeBaseForm:
    """State of the create/edit dialogs."""

    name: str = ""
    description: str = ""
    prompt_instructions: str = ""
    files: list[FileBlob] = field(default_factory=list)

    @classmethod
    def from_knowledge_base(cls, kb: KnowledgeBase) -> "KnowledgeBaseForm":
        return cls(
            name=kb.name,
            description=kb.description or "",
            prompt_instructions=kb.prompt_instructions or "",
        )


class FileTarget(str, Enum):
    """Which dialog a file selection belongs to."""

    CREATE = "create"
    EDIT = "edit"
    UPLOAD = "upload"


class KnowledgeBaseManagement:
    """Knowledge bases page: CRUD, document upload and license attachment."""

    def __init__(self, client: AsyncRagAdminClient, notifier: NotifierPort):
        self.client = client
        self.notifier = notifier
        self.knowledge_bases: list[KnowledgeBase] = []
        self.licenses: list[License] = []
        self.is_loading = True

        self.create_form = KnowledgeBaseForm()
        self.edit_form = KnowledgeBaseForm()
        self.editing: KnowledgeBase | None = None
        self.upload_target: KnowledgeBase | None = None
        self.upload_selection: list[FileBlob] = []

    async def load(self) -> bool:
        """Reload knowledge bases and licenses concurrently."""
        try:
            knowledge_bases, licenses = await asyncio.gather(
                self.client.list_knowledge_bases(),
                self.client.list_licenses(),
            )
        except RagAdminError as e:
            self.notifier.error(describe_error(e, "Failed to load data"))
            return False
        finally:
            self.is_loading = False

        self.knowledge_bases = knowledge_bases
        self.licenses = licenses
        return True

    # -------------------------------------------------------------------------
    # File selection
    # -------------------------------------------------------------------------

    def _selection(self, target: FileTarget) -> list[FileBlob]:
        if target == FileTarget.CREATE:
            return self.create_form.files
        if target == FileTarget.EDIT:
            return self.edit_form.files
        return self.upload_selection

    def select_files(self, target: FileTarget, files: Iterable[FileBlob]) -> FileSelection:
        """Append the PDF files to a dialog's selection; warn about the rest."""
        selection = filter_pdf_files(files)
        if selection.has_rejections:
            logger.info(
                "Filtered out non-PDF files: "
                + ", ".join(f.filename for f in selection.rejected)
            )
            self.notifier.warning(NON_PDF_WARNING)
        self._selection(target).extend(selection.accepted)
        return selection

    def remove_file(self, target: FileTarget, index: int) -> None:
        del self._selection(target)[index]

    # -------------------------------------------------------------------------
    # Dialogs
    # -------------------------------------------------------------------------

    def open_edit(self, kb: KnowledgeBase) -> None:
        self.editing = kb
        self.edit_form = KnowledgeBaseForm.from_knowledge_base(kb)

    def close_edit(self) -> None:
        self.editing = None
        self.edit_form = KnowledgeBaseForm()

    def open_upload(self, kb: KnowledgeBase) -> None:
        self.upload_target = kb
        self.upload_selection = []

    def close_upload(self) -> None:
        self.upload_target = None
        self.upload_selection = []

    # -------------------------------------------------------------------------
    # Workflows
    # -------------------------------------------------------------------------

    async def create_knowledge_base(
        self, form: KnowledgeBaseForm | None = None
    ) -> WorkflowResult[KnowledgeBase]:
        form = form or self.create_form
        if not form.name.strip():
            self.notifier.error("Please enter a name")
            return WorkflowResult.rejected("Please enter a name")

        request = CreateKnowledgeBaseRequest(
            name=form.name,
            description=form.description or None,
            prompt_instructions=form.prompt_instructions or None,
        )
        try:
            kb = await self.client.create_knowledge_base(request)
        except RagAdminError as e:
            message = describe_error(e, "Failed to create knowledge base")
            self.notifier.error(message)
            return WorkflowResult.failed(e, message)

        files = list(form.files)
        if files:
            secondary = await self._upload(kb.id, files, "Knowledge base created")
            if not secondary.failed_step:
                self.notifier.success(
                    f"Knowledge base created and {len(files)} file(s) uploaded successfully"
                )
        else:
            secondary = StepResult.skipped()
            self.notifier.success("Knowledge base created successfully")

        self.create_form = KnowledgeBaseForm()
        await self.load()
        return WorkflowResult(primary=StepResult.ok(), secondary=secondary, value=kb)

    async def update_knowledge_base(
        self,
        kb: KnowledgeBase | None = None,
        form: KnowledgeBaseForm | None = None,
    ) -> WorkflowResult[KnowledgeBase]:
        kb = kb or self.editing
        form = form or self.edit_form
        if kb is None or not form.name.strip():
            self.notifier.error("Please enter a name")
            return WorkflowResult.rejected("Please enter a name")

        request = UpdateKnowledgeBaseRequest(
            name=form.name,
            description=form.description or None,
            prompt_instructions=form.prompt_instructions or None,
        )
        try:
            updated = await self.client.update_knowledge_base(kb.id, request)
        except RagAdminError as e:
            message = describe_error(e, "Failed to update knowledge base")
            self.notifier.error(message)
            return WorkflowResult.failed(e, message)

        files = list(form.files)
        if files:
            secondary = await self._upload(kb.id, files, "Knowledge base updated")
        else:
            secondary = StepResult.skipped()

        if not secondary.failed_step:
            suffix = f" and {len(files)} file(s) uploaded" if files else ""
            self.notifier.success(f"Knowledge base updated successfully{suffix}")

        self.close_edit()
        await self.load()
        return WorkflowResult(primary=StepResult.ok(), secondary=secondary, value=updated)

    async def _upload(self, kb_id: str, files: list[FileBlob], done: str) -> StepResult:
        """Secondary upload step; failure is reported as a partial success."""
        try:
            await self.client.upload_files(kb_id, files)
        except RagAdminError as e:
            message = f"{done} but failed to upload files: {describe_error(e, 'Upload error')}"
            logger.warning(f"Upload of {len(files)} file(s) to {kb_id} failed: {e}")
            self.notifier.partial_success(message)
            return StepResult.failed(e, message)
        return StepResult.ok()

    async def upload_files(self) -> WorkflowResult[KnowledgeBase]:
        """Upload the upload dialog's selection to its target knowledge base."""
        kb = self.upload_target
        if kb is None:
            self.notifier.error("No knowledge base selected")
            return WorkflowResult.rejected("No knowledge base selected")
        files = list(self.upload_selection)
        if not files:
            self.notifier.error("Please select at least one file to upload")
            return WorkflowResult.rejected("Please select at least one file to upload")

        try:
            await self.client.upload_files(kb.id, files)
        except RagAdminError as e:
            message = describe_error(e, "Failed to upload files")
            self.notifier.error(message)
            return WorkflowResult.failed(e, message)

        self.notifier.success(f"{len(files)} file(s) uploaded successfully")
        self.close_upload()
        await self.load()
        return WorkflowResult(primary=StepResult.ok(), value=kb)

    async def attach_to_license(self, kb_id: str, license_id: str) -> WorkflowResult[None]:
        if not kb_id or not license_id:
            message = "Please select both knowledge base and license"
            self.notifier.error(message)
            return WorkflowResult.rejected(message)

        try:
            await self.client.attach_knowledge_base(
                AttachKnowledgeBaseRequest(kb_id=kb_id, license_id=license_id)
            )
        except RagAdminError as e:
            message = describe_error(e, "Failed to attach knowledge base")
            self.notifier.error(message)
            return WorkflowResult.failed(e, message)

        self.notifier.success("Knowledge base attached successfully")
        await self.load()
        return WorkflowResult(primary=StepResult.ok())

    async def delete_knowledge_base(self, kb: KnowledgeBase) -> WorkflowResult[None]:
        try:
            await self.client.delete_knowledge_base(kb.id)
        except RagAdminError as e:
            message = describe_error(e, "Failed to delete knowledge base")
            self.notifier.error(message)
            return WorkflowResult.failed(e, message)

        self.notifier.success("Knowledge base deleted successfully")
        await self.load()
        return WorkflowResult(primary=StepResult.ok())
