"""Use Cases - one controller per console page."""

from ragadmin.application.use_cases.manage_users import UserManagement
from ragadmin.application.use_cases.manage_licenses import LicenseForm, LicenseManagement
from ragadmin.application.use_cases.manage_knowledge_bases import (
    FileTarget,
    KnowledgeBaseForm,
    KnowledgeBaseManagement,
)
from ragadmin.application.use_cases.manage_ai_configuration import (
    AIConfigurationManagement,
)
from ragadmin.application.use_cases.load_dashboard import DashboardSummary, load_dashboard

__all__ = [
    "UserManagement",
    "LicenseForm",
    "LicenseManagement",
    "FileTarget",
    "KnowledgeBaseForm",
    "KnowledgeBaseManagement",
    "AIConfigurationManagement",
    "DashboardSummary",
    "load_dashboard",
]
