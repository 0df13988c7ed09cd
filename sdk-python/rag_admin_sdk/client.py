"""RAG Admin SDK client implementation."""

import logging
from typing import Optional, Dict, Any, List, Sequence, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError as PydanticValidationError

from rag_admin_sdk.files import FileBlob, to_multipart
from rag_admin_sdk.models import (
    AIConfiguration,
    AttachKnowledgeBaseRequest,
    AuthResponse,
    CreateKnowledgeBaseRequest,
    CreateLicenseRequest,
    ErrorResponse,
    KnowledgeBase,
    License,
    LicenseStateResponse,
    LoginRequest,
    RegisterRequest,
    UpdateAIConfigRequest,
    UpdateKnowledgeBaseRequest,
    UpdateUserRequest,
    User,
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
from rag_admin_sdk.session import Session

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class _BaseClient:
    """Base client with shared functionality."""

    DEFAULT_BASE_URL = "https://api-ai-rag-o62iq.ondigitalocean.app"
    DEFAULT_TIMEOUT = 30.0
    JSON_CONTENT_TYPE = "application/json"

    def __init__(
        self,
        base_url: Optional[str] = None,
        session: Optional[Session] = None,
        timeout: float = DEFAULT_TIMEOUT,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.base_url = (base_url or self.DEFAULT_BASE_URL).rstrip("/")
        self.session = session or Session()
        self.timeout = timeout
        self._custom_headers = headers or {}

    def _build_headers(self) -> Dict[str, str]:
        """Build static request headers.

        Content-Type and Authorization are decided per request by the
        request hook, not here.
        """
        return {
            "Accept": self.JSON_CONTENT_TYPE,
            **self._custom_headers,
        }

    def _apply_request_policy(self, request: httpx.Request) -> None:
        """Attach the current bearer token and the default content type."""
        token = self.session.token
        if token:
            request.headers["Authorization"] = f"Bearer {token}"
        # Multipart bodies already carry their boundary header
        if "content-type" not in request.headers:
            request.headers["Content-Type"] = self.JSON_CONTENT_TYPE

    def _apply_response_policy(self, response: httpx.Response) -> None:
        """Expire the session when the backend rejects the credentials."""
        if response.status_code == 401:
            logger.warning(
                f"Unauthorized response for {response.request.method} "
                f"{response.request.url.path}, clearing session"
            )
            self.session.expire()

    def _handle_error(self, response: httpx.Response) -> None:
        """Handle HTTP error responses."""
        try:
            body = response.json()
        except ValueError:
            body = {"detail": response.text} if response.text else {}
        if not isinstance(body, dict):
            body = {"detail": body}

        try:
            backend_message = ErrorResponse.model_validate(body).message or None
        except PydanticValidationError:
            backend_message = None
        message = backend_message or body.get("detail") or response.reason_phrase
        message = str(message or "Unknown error")
        status_code = response.status_code
        kwargs = {
            "status_code": status_code,
            "response_body": body,
            "backend_message": backend_message,
        }

        if status_code == 401:
            raise AuthenticationError(message, **kwargs)
        elif status_code == 403:
            raise PermissionDeniedError(message, **kwargs)
        elif status_code == 404:
            raise NotFoundError(message, **kwargs)
        elif status_code == 409:
            raise ConflictError(message, **kwargs)
        elif status_code in (400, 422):
            raise ValidationError(message, **kwargs)
        elif status_code >= 500:
            raise ServerError(message, **kwargs)
        else:
            raise RagAdminError(message, **kwargs)


class AsyncRagAdminClient(_BaseClient):
    """Asynchronous client for the RAG backend admin API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        session: Optional[Session] = None,
        timeout: float = _BaseClient.DEFAULT_TIMEOUT,
        headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the admin API client.

        Args:
            base_url: Base URL of the RAG backend
            session: Session whose token is attached to every request
            timeout: Request timeout in seconds (default: 30)
            headers: Additional headers to include in requests
            transport: Custom httpx transport (tests, proxies)
        """
        super().__init__(base_url, session, timeout, headers)
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            headers=self._build_headers(),
            transport=transport,
            event_hooks={
                "request": [self._on_request],
                "response": [self._on_response],
            },
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.close()

    async def close(self) -> None:
        """Close the client."""
        await self._client.aclose()

    async def _on_request(self, request: httpx.Request) -> None:
        self._apply_request_policy(request)

    async def _on_response(self, response: httpx.Response) -> None:
        self._apply_response_policy(response)

    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        files: Optional[list] = None,
        decode: bool = True,
    ) -> Any:
        """Send one request and return the decoded body.

        Returns None when the body is empty or ``decode`` is False; the
        latter is for operations whose response carries nothing the caller
        uses.
        """
        logger.debug(f"{method} {path}")
        try:
            response = await self._client.request(method, path, json=json, files=files)
        except httpx.TransportError as e:
            raise TransportError(f"Could not reach {self.base_url}: {e}") from e

        if response.status_code >= 400:
            self._handle_error(response)

        if not decode or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ResponseDecodeError(
                f"{method} {path} returned a non-JSON body",
                status_code=response.status_code,
                response_body={"detail": response.text},
            ) from e

    def _parse(self, model: Type[M], data: Any) -> M:
        """Validate a decoded body against ``model``."""
        try:
            return model.model_validate(data)
        except PydanticValidationError as e:
            logger.warning(f"Unexpected {model.__name__} payload: {e}")
            raise ResponseDecodeError(
                f"Unexpected {model.__name__} payload",
                response_body=data if isinstance(data, dict) else {"detail": data},
            ) from e

    def _parse_list(self, model: Type[M], data: Any) -> List[M]:
        if data is None:
            return []
        if not isinstance(data, list):
            raise ResponseDecodeError(
                f"Expected a list of {model.__name__}",
                response_body=data if isinstance(data, dict) else {"detail": data},
            )
        return [self._parse(model, item) for item in data]

    # -------------------------------------------------------------------------
    # Authentication
    # -------------------------------------------------------------------------

    async def login(self, request: LoginRequest) -> AuthResponse:
        data = await self._request("POST", "/auth/login", json=request.to_payload())
        return self._parse(AuthResponse, data)

    async def register(self, request: RegisterRequest) -> AuthResponse:
        data = await self._request("POST", "/auth/register", json=request.to_payload())
        return self._parse(AuthResponse, data)

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    async def list_users(self) -> List[User]:
        data = await self._request("GET", "/users")
        return self._parse_list(User, data)

    async def get_user(self, user_id: str) -> User:
        data = await self._request("GET", f"/users/{user_id}")
        return self._parse(User, data)

    async def create_user(self, request: RegisterRequest) -> User:
        """Register a new account and return it (the issued token is discarded)."""
        response = await self.register(request)
        return response.user

    async def update_user(self, user_id: str, request: UpdateUserRequest) -> User:
        data = await self._request(
            "PATCH", f"/users/{user_id}", json=request.to_payload()
        )
        return self._parse(User, data)

    async def delete_user(self, user_id: str) -> None:
        await self._request("DELETE", f"/users/{user_id}", decode=False)

    # -------------------------------------------------------------------------
    # Licenses
    # -------------------------------------------------------------------------

    async def list_licenses(self) -> List[License]:
        data = await self._request("GET", "/licenses")
        return self._parse_list(License, data)

    async def get_license(self, license_id: str) -> License:
        data = await self._request("GET", f"/licenses/{license_id}")
        return self._parse(License, data)

    async def create_license(self, request: CreateLicenseRequest) -> License:
        data = await self._request("POST", "/licenses", json=request.to_payload())
        return self._parse(License, data)

    async def activate_license(self, license_id: str) -> License:
        data = await self._request("PATCH", f"/licenses/{license_id}/activate")
        return self._parse(LicenseStateResponse, data).license

    async def deactivate_license(self, license_id: str) -> License:
        data = await self._request("PATCH", f"/licenses/{license_id}/deactivate")
        return self._parse(LicenseStateResponse, data).license

    # -------------------------------------------------------------------------
    # Knowledge bases
    # -------------------------------------------------------------------------

    async def list_knowledge_bases(self) -> List[KnowledgeBase]:
        data = await self._request("GET", "/knowledge-bases")
        return self._parse_list(KnowledgeBase, data)

    async def create_knowledge_base(
        self, request: CreateKnowledgeBaseRequest
    ) -> KnowledgeBase:
        data = await self._request(
            "POST", "/knowledge-bases", json=request.to_payload()
        )
        return self._parse(KnowledgeBase, data)

    async def update_knowledge_base(
        self, kb_id: str, request: UpdateKnowledgeBaseRequest
    ) -> KnowledgeBase:
        data = await self._request(
            "PATCH", f"/knowledge-bases/{kb_id}", json=request.to_payload()
        )
        return self._parse(KnowledgeBase, data)

    async def delete_knowledge_base(self, kb_id: str) -> None:
        await self._request("DELETE", f"/knowledge-bases/{kb_id}", decode=False)

    async def attach_knowledge_base(self, request: AttachKnowledgeBaseRequest) -> None:
        await self._request(
            "POST",
            "/knowledge-bases/attach",
            json=request.to_payload(),
            decode=False,
        )

    async def upload_files(self, kb_id: str, files: Sequence[FileBlob]) -> None:
        """
        Upload documents to a knowledge base.

        All files travel in a single multipart request, in order, each as a
        ``files`` part.

        Args:
            kb_id: Target knowledge base id
            files: Blobs to upload (at least one)
        """
        if not files:
            raise ValueError("upload_files requires at least one file")
        await self._request(
            "POST",
            f"/knowledge-bases/{kb_id}/upload",
            files=to_multipart(files),
            decode=False,
        )

    # -------------------------------------------------------------------------
    # AI configuration
    # -------------------------------------------------------------------------

    async def get_ai_configuration(self) -> AIConfiguration:
        data = await self._request("GET", "/config/ai")
        return self._parse(AIConfiguration, data)

    async def update_ai_configuration(
        self, request: UpdateAIConfigRequest
    ) -> AIConfiguration:
        data = await self._request("PUT", "/config/ai", json=request.to_payload())
        return self._parse(AIConfiguration, data)
