"""Tests for the knowledge base workflows."""

import pytest

from rag_admin_sdk import FileBlob

from ragadmin.application.results import StepStatus, WorkflowOutcome
from ragadmin.application.use_cases import (
    FileTarget,
    KnowledgeBaseForm,
    KnowledgeBaseManagement,
)
from ragadmin.application.use_cases.manage_knowledge_bases import NON_PDF_WARNING
from ragadmin.tests.factories import make_kb, server_error


def pdf(name="manual.pdf") -> FileBlob:
    return FileBlob(name, b"%PDF-1.4", "application/pdf")


@pytest.fixture
def page(client, notifier):
    client.create_knowledge_base.return_value = make_kb()
    client.update_knowledge_base.return_value = make_kb(name="Renamed")
    client.upload_files.return_value = None
    return KnowledgeBaseManagement(client, notifier)


class TestFileSelection:
    """Tests for PDF-only selection."""

    def test_non_pdf_filtered_with_warning(self, notifier, page):
        selection = page.select_files(
            FileTarget.CREATE, [pdf(), FileBlob("report.docx", b"PK")]
        )

        assert [f.filename for f in page.create_form.files] == ["manual.pdf"]
        assert [f.filename for f in selection.rejected] == ["report.docx"]
        assert notifier.last.title == "Warning"
        assert notifier.last.description == NON_PDF_WARNING

    def test_pdf_only_selection_is_silent(self, notifier, page):
        page.select_files(FileTarget.UPLOAD, [pdf("a.pdf"), pdf("b.pdf")])

        assert len(page.upload_selection) == 2
        assert notifier.notifications == []

    def test_remove_file(self, page):
        page.select_files(FileTarget.EDIT, [pdf("a.pdf"), pdf("b.pdf")])

        page.remove_file(FileTarget.EDIT, 0)

        assert [f.filename for f in page.edit_form.files] == ["b.pdf"]


class TestCreateKnowledgeBase:
    """Tests for the create-then-upload workflow."""

    @pytest.mark.asyncio
    async def test_rejects_blank_name(self, client, notifier, page):
        result = await page.create_knowledge_base(KnowledgeBaseForm(name="  "))

        assert result.outcome == WorkflowOutcome.REJECTED
        assert notifier.last.description == "Please enter a name"
        client.create_knowledge_base.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_without_files(self, client, notifier, page):
        """Test one create call and no upload."""
        result = await page.create_knowledge_base(KnowledgeBaseForm(name="Manuals"))

        assert result.outcome == WorkflowOutcome.SUCCESS
        client.create_knowledge_base.assert_awaited_once()
        client.upload_files.assert_not_awaited()
        request = client.create_knowledge_base.await_args.args[0]
        assert request.to_payload() == {
            "name": "Manuals",
            "description": None,
            "promptInstructions": None,
        }
        assert notifier.last.description == "Knowledge base created successfully"

    @pytest.mark.asyncio
    async def test_with_files(self, client, notifier, page):
        """Test all files go up in one call to the new id."""
        page.select_files(FileTarget.CREATE, [pdf("a.pdf"), pdf("b.pdf")])
        page.create_form.name = "Manuals"

        result = await page.create_knowledge_base()

        assert result.outcome == WorkflowOutcome.SUCCESS
        kb_id, files = client.upload_files.await_args.args
        assert kb_id == "kb-1"
        assert [f.filename for f in files] == ["a.pdf", "b.pdf"]
        assert notifier.last.description == (
            "Knowledge base created and 2 file(s) uploaded successfully"
        )
        assert page.create_form == KnowledgeBaseForm()

    @pytest.mark.asyncio
    async def test_upload_failure_is_partial_success(self, client, notifier, page):
        """Test the knowledge base is kept when its upload fails."""
        client.upload_files.side_effect = server_error("File too large")

        result = await page.create_knowledge_base(
            KnowledgeBaseForm(name="Manuals", files=[pdf()])
        )

        assert result.outcome == WorkflowOutcome.PARTIAL_SUCCESS
        assert result.secondary.status == StepStatus.ERROR
        assert result.value.id == "kb-1"
        assert notifier.titles() == ["Partial Success"]
        assert notifier.last.description == (
            "Knowledge base created but failed to upload files: File too large"
        )
        client.delete_knowledge_base.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_upload_failure_without_backend_message(self, client, notifier, page):
        client.upload_files.side_effect = server_error()

        await page.create_knowledge_base(KnowledgeBaseForm(name="Manuals", files=[pdf()]))

        assert notifier.last.description.endswith("failed to upload files: Upload error")

    @pytest.mark.asyncio
    async def test_create_failure_skips_upload(self, client, notifier, page):
        client.create_knowledge_base.side_effect = server_error()

        result = await page.create_knowledge_base(
            KnowledgeBaseForm(name="Manuals", files=[pdf()])
        )

        assert result.outcome == WorkflowOutcome.FAILURE
        client.upload_files.assert_not_awaited()
        assert notifier.last.description == "Failed to create knowledge base"


class TestUpdateKnowledgeBase:
    """Tests for the patch-then-upload workflow."""

    @pytest.mark.asyncio
    async def test_update_without_files(self, client, notifier, page):
        kb = make_kb(description="Old")
        page.open_edit(kb)
        page.edit_form.name = "Renamed"
        page.edit_form.description = ""

        result = await page.update_knowledge_base()

        assert result.outcome == WorkflowOutcome.SUCCESS
        kb_id, request = client.update_knowledge_base.await_args.args
        assert kb_id == "kb-1"
        assert request.to_payload() == {
            "name": "Renamed",
            "description": None,
            "promptInstructions": None,
        }
        client.upload_files.assert_not_awaited()
        assert notifier.last.description == "Knowledge base updated successfully"
        assert page.editing is None

    @pytest.mark.asyncio
    async def test_update_with_files(self, client, notifier, page):
        page.open_edit(make_kb())
        page.select_files(FileTarget.EDIT, [pdf()])

        await page.update_knowledge_base()

        client.upload_files.assert_awaited_once()
        assert notifier.last.description == (
            "Knowledge base updated successfully and 1 file(s) uploaded"
        )

    @pytest.mark.asyncio
    async def test_update_upload_failure(self, client, notifier, page):
        client.upload_files.side_effect = server_error()
        page.open_edit(make_kb())
        page.select_files(FileTarget.EDIT, [pdf()])

        result = await page.update_knowledge_base()

        assert result.outcome == WorkflowOutcome.PARTIAL_SUCCESS
        assert notifier.titles() == ["Partial Success"]
        assert notifier.last.description.startswith("Knowledge base updated but failed")

    @pytest.mark.asyncio
    async def test_update_failure(self, client, notifier, page):
        client.update_knowledge_base.side_effect = server_error()
        page.open_edit(make_kb())

        result = await page.update_knowledge_base()

        assert result.outcome == WorkflowOutcome.FAILURE
        assert notifier.last.description == "Failed to update knowledge base"
        assert page.editing is not None


class TestUploadFiles:
    """Tests for the standalone upload dialog."""

    @pytest.mark.asyncio
    async def test_requires_target(self, notifier, page):
        result = await page.upload_files()

        assert result.outcome == WorkflowOutcome.REJECTED
        assert notifier.last.description == "No knowledge base selected"

    @pytest.mark.asyncio
    async def test_requires_files(self, client, notifier, page):
        page.open_upload(make_kb())

        result = await page.upload_files()

        assert result.outcome == WorkflowOutcome.REJECTED
        assert notifier.last.description == "Please select at least one file to upload"
        client.upload_files.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_uploads_selection(self, client, notifier, page):
        page.open_upload(make_kb())
        page.select_files(FileTarget.UPLOAD, [pdf("a.pdf"), pdf("b.pdf")])

        result = await page.upload_files()

        assert result.outcome == WorkflowOutcome.SUCCESS
        assert notifier.last.description == "2 file(s) uploaded successfully"
        assert page.upload_target is None

    @pytest.mark.asyncio
    async def test_upload_error(self, client, notifier, page):
        client.upload_files.side_effect = server_error()
        page.open_upload(make_kb())
        page.select_files(FileTarget.UPLOAD, [pdf()])

        result = await page.upload_files()

        assert result.outcome == WorkflowOutcome.FAILURE
        assert notifier.last.description == "Failed to upload files"


class TestAttachAndDelete:
    """Tests for attach and delete."""

    @pytest.mark.asyncio
    async def test_attach_requires_both_ids(self, client, notifier, page):
        result = await page.attach_to_license("kb-1", "")

        assert result.outcome == WorkflowOutcome.REJECTED
        assert notifier.last.description == "Please select both knowledge base and license"
        client.attach_knowledge_base.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_attach(self, client, notifier, page):
        await page.attach_to_license("kb-1", "lic-1")

        request = client.attach_knowledge_base.await_args.args[0]
        assert request.to_payload() == {"kbId": "kb-1", "licenseId": "lic-1"}
        assert notifier.last.description == "Knowledge base attached successfully"

    @pytest.mark.asyncio
    async def test_delete(self, client, notifier, page):
        await page.delete_knowledge_base(make_kb())

        client.delete_knowledge_base.assert_awaited_once_with("kb-1")
        assert notifier.last.description == "Knowledge base deleted successfully"

    @pytest.mark.asyncio
    async def test_delete_failure(self, client, notifier, page):
        client.delete_knowledge_base.side_effect = server_error()

        result = await page.delete_knowledge_base(make_kb())

        assert result.outcome == WorkflowOutcome.FAILURE
        assert notifier.last.description == "Failed to delete knowledge base"
