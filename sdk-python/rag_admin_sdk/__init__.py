"""RAG Admin SDK - Python client for the RAG backend admin API."""

from rag_admin_sdk.client import AsyncRagAdminClient
from rag_admin_sdk.files import FileBlob, FileSelection, filter_pdf_files, to_multipart
from rag_admin_sdk.models import (
    AIConfiguration,
    AttachKnowledgeBaseRequest,
    AuthResponse,
    CreateKnowledgeBaseRequest,
    CreateLicenseRequest,
    DocumentMetadata,
    KnowledgeBase,
    License,
    LLMProvider,
    LoginRequest,
    PROVIDER_PARAMETERS,
    RegisterRequest,
    UpdateAIConfigRequest,
    UpdateKnowledgeBaseRequest,
    UpdateUserRequest,
    User,
    UserRole,
)
from rag_admin_sdk.exceptions import (
    RagAdminError,
    AuthenticationError,
    PermissionDeniedError,
    NotFoundError,
    ConflictError,
    ValidationError,
    ServerError,
    TransportError,
    ResponseDecodeError,
)
from rag_admin_sdk.session import (
    Session,
    SessionEvent,
    SessionStorage,
    MemorySessionStorage,
    FileSessionStorage,
)

__version__ = "0.1.0"
__all__ = [
    "AsyncRagAdminClient",
    "FileBlob",
    "FileSelection",
    "filter_pdf_files",
    "to_multipart",
    "AIConfiguration",
    "AttachKnowledgeBaseRequest",
    "AuthResponse",
    "CreateKnowledgeBaseRequest",
    "CreateLicenseRequest",
    "DocumentMetadata",
    "KnowledgeBase",
    "License",
    "LLMProvider",
    "LoginRequest",
    "PROVIDER_PARAMETERS",
    "RegisterRequest",
    "UpdateAIConfigRequest",
    "UpdateKnowledgeBaseRequest",
    "UpdateUserRequest",
    "User",
    "UserRole",
    "RagAdminError",
    "AuthenticationError",
    "PermissionDeniedError",
    "NotFoundError",
    "ConflictError",
    "ValidationError",
    "ServerError",
    "TransportError",
    "ResponseDecodeError",
    "Session",
    "SessionEvent",
    "SessionStorage",
    "MemorySessionStorage",
    "FileSessionStorage",
]
