"""
Abstract base class for workflow sessions.
"""

import uuid
from abc import ABC, abstractmethod
from datetime import UTC, datetime
from typing import Any


class BaseWorkflowSession(ABC):
    """
    Abstract base class for workflow sessions.

    Steps are addressed by a 1-based position into get_workflow_steps().
    Navigation is clamped to the first and last step.
    """

    def __init__(self, session_id: str | None = None):
        """Initialize base workflow session."""
        self.session_id = session_id or str(uuid.uuid4())
        self.current_step = 1
        self.completed_steps: list[str] = []
        self.step_errors: dict[str, str] = {}
        self.created_at = datetime.now(UTC)
        self.updated_at = datetime.now(UTC)

    @abstractmethod
    def get_workflow_steps(self) -> list[str]:
        """Return ordered list of workflow steps."""

    @property
    def last_step(self) -> int:
        return len(self.get_workflow_steps())

    @property
    def current_step_name(self) -> str:
        return self.get_workflow_steps()[self.current_step - 1]

    def touch(self):
        self.updated_at = datetime.now(UTC)

    def advance(self) -> int:
        """Move to the next step. No-op on the last step."""
        if self.current_step < self.last_step:
            self.current_step += 1
            self.touch()
        return self.current_step

    def retreat(self) -> int:
        """Move to the previous step. No-op on the first step."""
        if self.current_step > 1:
            self.current_step -= 1
            self.touch()
        return self.current_step

    def mark_step_complete(self, step: str):
        """Mark a step as completed."""
        if step not in self.completed_steps:
            self.completed_steps.append(step)

        self.touch()

        # Clear any errors for this step
        self.step_errors.pop(step, None)

    def reset_navigation(self):
        self.current_step = 1
        self.completed_steps = []
        self.step_errors = {}
        self.touch()

    def get_progress_percentage(self) -> float:
        """Calculate workflow completion percentage."""
        total_steps = len(self.get_workflow_steps())
        completed = len(self.completed_steps)
        return (completed / total_steps) * 100 if total_steps > 0 else 0

    def to_dict(self) -> dict[str, Any]:
        """Serialize session to dictionary."""
        return {
            "session_id": self.session_id,
            "current_step": self.current_step,
            "current_step_name": self.current_step_name,
            "completed_steps": self.completed_steps,
            "step_errors": self.step_errors,
            "progress": self.get_progress_percentage(),
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }
