"""
Password complexity validation helper.

Provides password strength validation with configurable requirements.
"""

import re
from dataclasses import dataclass
from typing import List


@dataclass
class PasswordRequirements:
    """Password complexity requirements configuration."""

    min_length: int = 6
    require_uppercase: bool = True
    require_lowercase: bool = True
    require_digit: bool = True


DEFAULT_REQUIREMENTS = PasswordRequirements()


def validate_password_complexity(
    password: str,
    requirements: PasswordRequirements = DEFAULT_REQUIREMENTS,
) -> tuple[bool, List[str]]:
    """
    Validate password against complexity requirements.

    Args:
        password: Password to validate
        requirements: Password requirements configuration

    Returns:
        Tuple of (is_valid, list of error messages)
    """
    errors: List[str] = []

    if len(password) < requirements.min_length:
        errors.append(
            f"Password must be at least {requirements.min_length} characters long"
        )

    if requirements.require_uppercase and not re.search(r"[A-Z]", password):
        errors.append("Password must contain at least one uppercase letter")

    if requirements.require_lowercase and not re.search(r"[a-z]", password):
        errors.append("Password must contain at least one lowercase letter")

    if requirements.require_digit and not re.search(r"\d", password):
        errors.append("Password must contain at least one digit")

    return len(errors) == 0, errors
