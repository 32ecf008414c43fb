from moodmate.errors import ValidationError
from moodmate.utils import is_email


def validate_name(name: str | None) -> str:
    """Return the trimmed display name, rejecting blank input."""
    if not name or not name.strip():
        raise ValidationError("Name is required")
    return name.strip()


def validate_email(email: str | None) -> str:
    """Return the trimmed email, rejecting blank or malformed input."""
    if not email or not email.strip():
        raise ValidationError("Email is required")
    email = email.strip()
    if not is_email(email):
        raise ValidationError("Invalid email format")
    return email


def validate_password(password: str | None, min_length: int, max_length: int) -> str:
    """Validate password meets requirements.

    Requirements:
    - Present
    - Length within [min_length, max_length]

    Whitespace counts toward the length like any other character.

    Raises:
        ValidationError: If password doesn't meet requirements
    """
    if not password:
        raise ValidationError("Password is required")

    if len(password) < min_length:
        raise ValidationError(f"Password must be at least {min_length} characters long")

    if len(password) > max_length:
        raise ValidationError(f"Password must be at most {max_length} characters long")

    return password
