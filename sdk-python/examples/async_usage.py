#!/usr/bin/env python3
"""Async usage examples for the RAG Admin SDK."""

import asyncio
import os
import sys

from rag_admin_sdk import (
    AsyncRagAdminClient,
    AttachKnowledgeBaseRequest,
    CreateKnowledgeBaseRequest,
    CreateLicenseRequest,
    FileBlob,
    LoginRequest,
    RagAdminError,
    filter_pdf_files,
)


async def main():
    async with AsyncRagAdminClient(base_url=os.environ.get("RAGADMIN_API_URL")) as client:
        # Log in and keep the token for the following calls
        print("=== Login ===")
        auth = await client.login(
            LoginRequest(
                email=os.environ["RAGADMIN_EMAIL"],
                password=os.environ["RAGADMIN_PASSWORD"],
            )
        )
        client.session.store(auth.token, auth.user)
        print(f"Logged in as {auth.user.email} ({auth.user.role.value})")

        # Parallel listings
        print("\n=== Overview ===")
        users, licenses, knowledge_bases = await asyncio.gather(
            client.list_users(),
            client.list_licenses(),
            client.list_knowledge_bases(),
        )
        print(f"  {len(users)} users, {len(licenses)} licenses, {len(knowledge_bases)} knowledge bases")

        # Knowledge base with documents
        print("\n=== Knowledge Base ===")
        kb = await client.create_knowledge_base(
            CreateKnowledgeBaseRequest(name="Product manuals", description="Example")
        )
        selection = filter_pdf_files(FileBlob.from_path(p) for p in sys.argv[1:])
        for blob in selection.rejected:
            print(f"  Skipping {blob.filename}: not a PDF")
        if selection.accepted:
            try:
                await client.upload_files(kb.id, selection.accepted)
                print(f"  Uploaded {len(selection.accepted)} file(s) to {kb.name}")
            except RagAdminError as e:
                print(f"  Upload failed: {e}")

        # License for the first customer, with the new knowledge base attached
        print("\n=== License ===")
        customer = next((u for u in users if u.role.value == "CUSTOMER"), None)
        if customer is None:
            print("  No customer account to license")
            return
        lic = await client.create_license(
            CreateLicenseRequest(user_id=customer.id, validity_period_days=30)
        )
        await client.attach_knowledge_base(
            AttachKnowledgeBaseRequest(kb_id=kb.id, license_id=lic.id)
        )
        print(f"  {lic.key} for {customer.email}, expires {lic.expires_at}")


if __name__ == "__main__":
    asyncio.run(main())
