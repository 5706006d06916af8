"""
Input validation for user-supplied account fields.

The validator is a plain object handed to the service, so tests and
callers can substitute their own rules.
"""

import re

from app.core.errors import InvalidEmailError, InvalidNameError, InvalidPasswordError

MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_LENGTH = 128
MIN_NAME_LENGTH = 1
MAX_NAME_LENGTH = 255
MAX_EMAIL_LENGTH = 255

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")


class InputValidator:
    """Checks email, name and password values, raising the matching error."""

    def validate_email(self, email: str) -> None:
        if not email or not email.strip():
            raise InvalidEmailError("Email is required")
        if len(email) > MAX_EMAIL_LENGTH:
            raise InvalidEmailError(f"Email must be at most {MAX_EMAIL_LENGTH} characters")
        if not EMAIL_PATTERN.match(email):
            raise InvalidEmailError()

    def validate_name(self, name: str) -> None:
        if not name or len(name.strip()) < MIN_NAME_LENGTH:
            raise InvalidNameError("Name is required")
        if len(name) > MAX_NAME_LENGTH:
            raise InvalidNameError(f"Name must be at most {MAX_NAME_LENGTH} characters")

    def validate_password(self, password: str) -> None:
        if password is None or len(password) < MIN_PASSWORD_LENGTH:
            raise InvalidPasswordError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        if len(password) > MAX_PASSWORD_LENGTH:
            raise InvalidPasswordError(f"Password must be at most {MAX_PASSWORD_LENGTH} characters")

    def validate_registration(self, email: str, name: str, password: str) -> None:
        """Validate in order email, name, password. The first failure wins."""
        self.validate_email(email)
        self.validate_name(name)
        self.validate_password(password)
