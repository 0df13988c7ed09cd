"""Tests for two-phase workflow results."""

from ragadmin.application.results import (
    StepResult,
    StepStatus,
    WorkflowOutcome,
    WorkflowResult,
    describe_error,
)
from ragadmin.tests.factories import server_error


class TestWorkflowResult:
    """Tests for outcome derivation."""

    def test_success_with_skipped_secondary(self):
        result = WorkflowResult(primary=StepResult.ok())
        assert result.secondary.status == StepStatus.SKIPPED
        assert result.outcome == WorkflowOutcome.SUCCESS
        assert result.succeeded is True

    def test_secondary_failure_is_partial_success(self):
        """Test a failed dependent step never turns into a failure."""
        result = WorkflowResult(
            primary=StepResult.ok(),
            secondary=StepResult.failed(server_error(), "upload failed"),
        )
        assert result.outcome == WorkflowOutcome.PARTIAL_SUCCESS
        assert result.succeeded is True

    def test_secondary_partial_error(self):
        result = WorkflowResult(
            primary=StepResult.ok(),
            secondary=StepResult.partially_failed([server_error()], "1 of 2 failed"),
        )
        assert result.outcome == WorkflowOutcome.PARTIAL_SUCCESS
        assert len(result.secondary.errors) == 1

    def test_primary_failure(self):
        error = server_error()
        result = WorkflowResult.failed(error, "Failed to create license")
        assert result.outcome == WorkflowOutcome.FAILURE
        assert result.primary.errors == [error]
        assert result.succeeded is False

    def test_rejected(self):
        result = WorkflowResult.rejected("Please select a user")
        assert result.outcome == WorkflowOutcome.REJECTED
        assert result.primary.message == "Please select a user"


class TestDescribeError:
    """Tests for describe_error."""

    def test_prefers_backend_message(self):
        assert describe_error(server_error("Database unavailable"), "Failed") == "Database unavailable"

    def test_falls_back(self):
        assert describe_error(server_error(), "Failed to load data") == "Failed to load data"

    def test_non_client_errors_fall_back(self):
        assert describe_error(RuntimeError("boom"), "Failed") == "Failed"
