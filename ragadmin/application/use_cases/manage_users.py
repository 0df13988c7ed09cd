"""Manage Users Use Case."""

import logging

from rag_admin_sdk import (
    AsyncRagAdminClient,
    RagAdminError,
    RegisterRequest,
    UpdateUserRequest,
    User,
    UserRole,
)

from ragadmin.application.results import StepResult, WorkflowResult, describe_error
from ragadmin.ports.notifier import NotifierPort

logger = logging.getLogger(__name__)

REQUIRED_FIELDS_MESSAGE = "Please fill in all required fields"


class UserManagement:
    """Users page: list, inspect, create, edit and delete accounts."""

    def __init__(self, client: AsyncRagAdminClient, notifier: NotifierPort):
        self.client = client
        self.notifier = notifier
        self.users: list[User] = []
        self.selected: User | None = None
        self.is_loading = True

    async def load(self) -> bool:
        try:
            self.users = await self.client.list_users()
        except RagAdminError as e:
            self.notifier.error(describe_error(e, "Failed to load users"))
            return False
        finally:
            self.is_loading = False
        return True

    async def view_user(self, user_id: str) -> User | None:
        """Fetch one user with its licenses for the details view."""
        try:
            self.selected = await self.client.get_user(user_id)
        except RagAdminError as e:
            self.notifier.error(describe_error(e, "Failed to load user details"))
            return None
        return self.selected

    async def create_user(
        self, email: str, password: str, role: UserRole | None = None
    ) -> WorkflowResult[User]:
        if not email or not password:
            self.notifier.error(REQUIRED_FIELDS_MESSAGE)
            return WorkflowResult.rejected(REQUIRED_FIELDS_MESSAGE)

        fields: dict = {"email": email, "password": password}
        if role is not None:
            fields["role"] = role
        try:
            user = await self.client.create_user(RegisterRequest(**fields))
        except RagAdminError as e:
            message = describe_error(e, "Failed to create user")
            self.notifier.error(message)
            return WorkflowResult.failed(e, message)

        self.notifier.success("User created successfully")
        await self.load()
        return WorkflowResult(primary=StepResult.ok(), value=user)

    async def update_user(
        self, user_id: str, email: str, role: UserRole | None = None
    ) -> WorkflowResult[User]:
        if not user_id or not email:
            self.notifier.error(REQUIRED_FIELDS_MESSAGE)
            return WorkflowResult.rejected(REQUIRED_FIELDS_MESSAGE)

        fields: dict = {"email": email}
        if role is not None:
            fields["role"] = role
        try:
            user = await self.client.update_user(user_id, UpdateUserRequest(**fields))
        except RagAdminError as e:
            message = describe_error(e, "Failed to update user")
            self.notifier.error(message)
            return WorkflowResult.failed(e, message)

        self.notifier.success("User updated successfully")
        await self.load()
        return WorkflowResult(primary=StepResult.ok(), value=user)

    async def delete_user(self, user: User) -> WorkflowResult[None]:
        try:
            await self.client.delete_user(user.id)
        except RagAdminError as e:
            message = describe_error(e, "Failed to delete user")
            self.notifier.error(message)
            return WorkflowResult.failed(e, message)

        logger.info(f"Deleted user {user.email}")
        self.notifier.success("User deleted successfully")
        await self.load()
        return WorkflowResult(primary=StepResult.ok())
