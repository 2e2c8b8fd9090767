"""
Base models for workflow framework.
"""

from enum import Enum


class WorkflowStatus(str, Enum):
    """Workflow status enumeration."""

    IN_PROGRESS = "in_progress"
    SUBMITTING = "submitting"
    ERROR = "error"
