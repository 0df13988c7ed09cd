"""RAG Admin SDK data models.

Wire format is camelCase JSON; attributes are snake_case. Request models are
dumped with ``exclude_unset`` so that a field never assigned is omitted while a
field explicitly set to ``None`` is sent as ``null``.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional, List, Dict, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base model mapping snake_case attributes to camelCase JSON keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_payload(self) -> Dict[str, Any]:
        """Serialize for the wire, keeping only explicitly assigned fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


class UserRole(str, Enum):
    ADMIN = "ADMIN"
    CUSTOMER = "CUSTOMER"


class LLMProvider(str, Enum):
    OPENAI = "OPENAI"
    GEMINI = "GEMINI"
    ANTHROPIC = "ANTHROPIC"


# =============================================================================
# Entities
# =============================================================================


class DocumentMetadata(ApiModel):
    """Metadata for one ingested document.

    The backend does not publish a fixed schema for documents, so unknown keys
    are kept as extra attributes. Non-mapping values are wrapped as ``raw``.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    kind: Literal["file", "raw"] = "file"
    name: Optional[str] = None
    url: Optional[str] = None
    size: Optional[int] = None
    content_type: Optional[str] = None
    uploaded_at: Optional[datetime] = None
    status: Optional[str] = None
    value: Optional[Any] = None

    @model_validator(mode="before")
    @classmethod
    def wrap_raw_values(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return data
        return {"kind": "raw", "value": data}


class KnowledgeBase(ApiModel):
    """A named document collection with prompt instructions."""

    id: str
    name: str
    description: Optional[str] = None
    documents: Optional[Dict[str, DocumentMetadata]] = None
    prompt_instructions: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @property
    def document_count(self) -> int:
        return len(self.documents or {})


class License(ApiModel):
    """A per-user entitlement, optionally bound to knowledge bases."""

    id: str
    key: str
    is_active: bool
    expires_at: Optional[datetime] = None
    user: Optional["User"] = None
    knowledge_bases: Optional[List[KnowledgeBase]] = None
    created_at: datetime
    updated_at: datetime

    def is_expired(self, now: datetime) -> bool:
        """A license without ``expires_at`` never expires."""
        if self.expires_at is None:
            return False
        expires_at = self.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return expires_at <= now


class User(ApiModel):
    """A dashboard or customer account."""

    id: str
    email: str
    role: UserRole
    licenses: Optional[List[License]] = None
    created_at: datetime
    updated_at: datetime


License.model_rebuild()


class AIConfiguration(ApiModel):
    """Global AI provider configuration (singleton)."""

    id: str
    key: str
    llm_provider: LLMProvider
    model: Optional[str] = None
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    top_p: Optional[float] = None
    top_k: Optional[int] = None
    frequency_penalty: Optional[float] = None
    presence_penalty: Optional[float] = None
    stop_sequences: Optional[List[str]] = None
    created_at: datetime
    updated_at: datetime


# =============================================================================
# Requests / responses
# =============================================================================


class LoginRequest(ApiModel):
    email: str
    password: str


class RegisterRequest(ApiModel):
    email: str
    password: str
    role: Optional[UserRole] = None


class UpdateUserRequest(ApiModel):
    email: Optional[str] = None
    role: Optional[UserRole] = None


class AuthResponse(ApiModel):
    token: str
    user: User


class CreateLicenseRequest(ApiModel):
    """Request for a new license.

    Leave ``validity_period_days`` unset for an unlimited license.
    """

    user_id: str
    validity_period_days: Optional[int] = Field(default=None, gt=0)


class LicenseStateResponse(ApiModel):
    """Response of the activate/deactivate endpoints."""

    message: Optional[str] = None
    license: License


class CreateKnowledgeBaseRequest(ApiModel):
    name: str
    description: Optional[str] = None
    documents: Optional[Dict[str, Any]] = None
    prompt_instructions: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("name must not be empty")
        return v


class UpdateKnowledgeBaseRequest(ApiModel):
    name: Optional[str] = None
    description: Optional[str] = None
    prompt_instructions: Optional[str] = None


class AttachKnowledgeBaseRequest(ApiModel):
    kb_id: str
    license_id: str


class UpdateAIConfigRequest(ApiModel):
    """Partial AI configuration update.

    Only assigned fields are transmitted; assign ``None`` to clear a value.
    """

    llm_provider: Optional[LLMProvider] = None
    model: Optional[str] = None
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    top_p: Optional[float] = None
    top_k: Optional[int] = None
    frequency_penalty: Optional[float] = None
    presence_penalty: Optional[float] = None
    stop_sequences: Optional[List[str]] = None


class ErrorResponse(ApiModel):
    message: str


# =============================================================================
# Provider parameter applicability
# =============================================================================


class ParameterSpec(BaseModel):
    """Input affordance for one sampling parameter."""

    name: str
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    step: Optional[float] = None


_COMMON_PARAMETERS = {
    "model": ParameterSpec(name="model"),
    "max_tokens": ParameterSpec(name="max_tokens", minimum=1),
    "top_p": ParameterSpec(name="top_p", minimum=0, maximum=1, step=0.1),
}

PROVIDER_PARAMETERS: Dict[LLMProvider, Dict[str, ParameterSpec]] = {
    LLMProvider.OPENAI: {
        **_COMMON_PARAMETERS,
        "temperature": ParameterSpec(name="temperature", minimum=0, maximum=1, step=0.1),
        "frequency_penalty": ParameterSpec(
            name="frequency_penalty", minimum=-2, maximum=2, step=0.1
        ),
        "presence_penalty": ParameterSpec(
            name="presence_penalty", minimum=-2, maximum=2, step=0.1
        ),
    },
    LLMProvider.GEMINI: {
        **_COMMON_PARAMETERS,
        "temperature": ParameterSpec(name="temperature", minimum=0, maximum=2, step=0.1),
        "top_k": ParameterSpec(name="top_k", minimum=1),
        "stop_sequences": ParameterSpec(name="stop_sequences"),
    },
    LLMProvider.ANTHROPIC: {
        **_COMMON_PARAMETERS,
        "temperature": ParameterSpec(name="temperature", minimum=0, maximum=1, step=0.1),
        "top_k": ParameterSpec(name="top_k", minimum=1),
        "stop_sequences": ParameterSpec(name="stop_sequences"),
    },
}
