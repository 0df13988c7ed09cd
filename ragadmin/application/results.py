"""Two-phase workflow results.

Multi-step workflows (create then attach, create/patch then upload) report the
primary step and the dependent secondary step separately. The primary step
decides between success and failure; a failed secondary step only downgrades
the outcome to a partial success. Nothing is rolled back.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, TypeVar

from rag_admin_sdk import RagAdminError

T = TypeVar("T")


class StepStatus(str, Enum):
    OK = "ok"
    ERROR = "error"
    PARTIAL_ERROR = "partial_error"
    SKIPPED = "skipped"
    REJECTED = "rejected"


class WorkflowOutcome(str, Enum):
    SUCCESS = "success"
    PARTIAL_SUCCESS = "partial_success"
    FAILURE = "failure"
    REJECTED = "rejected"


@dataclass
class StepResult:
    """Outcome of one step; ``errors`` keeps the exceptions that failed it."""

    status: StepStatus
    message: str | None = None
    errors: list[Exception] = field(default_factory=list)

    @classmethod
    def ok(cls) -> "StepResult":
        return cls(StepStatus.OK)

    @classmethod
    def skipped(cls) -> "StepResult":
        return cls(StepStatus.SKIPPED)

    @classmethod
    def rejected(cls, message: str) -> "StepResult":
        return cls(StepStatus.REJECTED, message)

    @classmethod
    def failed(cls, error: Exception, message: str) -> "StepResult":
        return cls(StepStatus.ERROR, message, [error])

    @classmethod
    def partially_failed(cls, errors: list[Exception], message: str) -> "StepResult":
        return cls(StepStatus.PARTIAL_ERROR, message, list(errors))

    @property
    def failed_step(self) -> bool:
        return self.status in (StepStatus.ERROR, StepStatus.PARTIAL_ERROR)


@dataclass
class WorkflowResult(Generic[T]):
    primary: StepResult
    secondary: StepResult = field(default_factory=StepResult.skipped)
    value: T | None = None

    @property
    def outcome(self) -> WorkflowOutcome:
        if self.primary.status == StepStatus.REJECTED:
            return WorkflowOutcome.REJECTED
        if self.primary.status != StepStatus.OK:
            return WorkflowOutcome.FAILURE
        if self.secondary.failed_step:
            return WorkflowOutcome.PARTIAL_SUCCESS
        return WorkflowOutcome.SUCCESS

    @property
    def succeeded(self) -> bool:
        """True when the primary step took effect (full or partial success)."""
        return self.outcome in (WorkflowOutcome.SUCCESS, WorkflowOutcome.PARTIAL_SUCCESS)

    @classmethod
    def rejected(cls, message: str) -> "WorkflowResult[T]":
        return cls(primary=StepResult.rejected(message))

    @classmethod
    def failed(cls, error: Exception, message: str) -> "WorkflowResult[T]":
        return cls(primary=StepResult.failed(error, message))


def describe_error(error: Exception, fallback: str) -> str:
    """Backend-supplied message when there is one, the fallback otherwise."""
    if isinstance(error, RagAdminError) and error.backend_message:
        return error.backend_message
    return fallback
