"""
Workflow Base Framework - Reusable components for multi-step workflows.
"""

from .backends import Identity, IdentityProvider, ObjectStore, RecordStore
from .base_session import BaseWorkflowSession
from .config import BaseWorkflowConfig
from .models import WorkflowStatus

__all__ = [
    "BaseWorkflowSession",
    "BaseWorkflowConfig",
    "WorkflowStatus",
    "Identity",
    "IdentityProvider",
    "RecordStore",
    "ObjectStore",
]
