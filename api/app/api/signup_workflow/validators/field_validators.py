"""
Field-level validators for the sign-up workflow.
Handles validation and sanitization of individual form fields.
"""

import logging
import re

logger = logging.getLogger(__name__)


def sanitize_name(name: str, label: str = "Name") -> str:
    """
    Sanitize an organization or person name.

    Args:
        name: Raw name input
        label: Field label used in error messages

    Returns:
        Sanitized name

    Raises:
        ValueError: If name is invalid
    """
    if not name or not name.strip():
        raise ValueError(f"{label} cannot be empty")

    # Remove excessive whitespace
    name = " ".join(name.split())

    # Limit length
    if len(name) > 255:
        raise ValueError(f"{label} cannot exceed 255 characters")

    # Allow letters, numbers, spaces, hyphens, apostrophes, periods, commas, ampersands
    allowed_pattern = r"^[\w\s\-'.,&]+$"
    if not re.match(allowed_pattern, name):
        raise ValueError(
            f"{label} contains invalid characters. Only letters, numbers, spaces, "
            "hyphens, apostrophes, periods, commas, and ampersands are allowed."
        )

    return name


def sanitize_optional_name(name: str | None, label: str = "Name") -> str | None:
    """Sanitize a name that may be left blank."""
    if not name or not name.strip():
        return None
    return sanitize_name(name, label)


def sanitize_middle_initial(initial: str | None) -> str | None:
    """Normalize a middle initial to a single upper-case letter."""
    if not initial or not initial.strip():
        return None

    initial = initial.strip().rstrip(".")
    if len(initial) != 1 or not initial.isalpha():
        raise ValueError("Middle initial must be a single letter")

    return initial.upper()


def sanitize_email(email: str) -> str:
    """
    Validate and sanitize email address.

    Args:
        email: Raw email input

    Returns:
        Validated email address

    Raises:
        ValueError: If email is invalid
    """
    if not email or not email.strip():
        raise ValueError("Email cannot be empty")

    # Convert to lowercase and strip whitespace
    email = email.lower().strip()

    # Basic email validation regex
    email_pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
    if not re.match(email_pattern, email):
        raise ValueError("Invalid email address format")

    if ".." in email:
        raise ValueError("Email cannot contain consecutive dots")

    # Limit length
    if len(email) > 254:
        raise ValueError("Email address too long")

    return email
