"""Dashboard overview: headline counts across users, licenses and knowledge bases."""

from dataclasses import dataclass
from datetime import datetime, timezone
import asyncio

from rag_admin_sdk import AsyncRagAdminClient, UserRole


@dataclass
class DashboardSummary:
    users: int
    admins: int
    licenses: int
    active_licenses: int
    expired_licenses: int
    knowledge_bases: int
    documents: int


async def load_dashboard(
    client: AsyncRagAdminClient, now: datetime | None = None
) -> DashboardSummary:
    """Load the three collections concurrently and summarize them.

    Client errors propagate to the caller.
    """
    now = now or datetime.now(timezone.utc)
    users, licenses, knowledge_bases = await asyncio.gather(
        client.list_users(),
        client.list_licenses(),
        client.list_knowledge_bases(),
    )
    return DashboardSummary(
        users=len(users),
        admins=sum(1 for u in users if u.role == UserRole.ADMIN),
        licenses=len(licenses),
        active_licenses=sum(1 for lic in licenses if lic.is_active and not lic.is_expired(now)),
        expired_licenses=sum(1 for lic in licenses if lic.is_expired(now)),
        knowledge_bases=len(knowledge_bases),
        documents=sum(kb.document_count for kb in knowledge_bases),
    )
