import re
from typing import Dict

from email_validator import validate_email, EmailNotValidError


class ValidationUtils:
    """Input checks shared by the request schemas."""

    PATTERNS = {
        'slug': re.compile(r'^[a-z0-9]+(?:-[a-z0-9]+)*$'),
        'phone': re.compile(r'^\+?[0-9 ()-]{7,20}$'),
    }

    MIN_PASSWORD_LENGTH = 8
    MAX_PASSWORD_LENGTH = 128
    MAX_NAME_LENGTH = 100
    MAX_PHONE_LENGTH = 20

    @classmethod
    def validate_email(cls, email: str) -> bool:
        try:
            validate_email(email, check_deliverability=False)
            return True
        except EmailNotValidError:
            return False

    @classmethod
    def normalize_email(cls, email: str) -> str:
        """Normalize email address for storage and lookup (always lower-case)"""
        try:
            validated = validate_email(email.strip(), check_deliverability=False)
            return validated.normalized.lower()
        except EmailNotValidError:
            # Lookups with a malformed address simply find nothing.
            return email.strip().lower()

    @classmethod
    def validate_password(cls, password: str) -> Dict[str, bool]:
        results = {
            'min_length': len(password) >= cls.MIN_PASSWORD_LENGTH,
            'max_length': len(password) <= cls.MAX_PASSWORD_LENGTH,
        }
        results['is_valid'] = all(results.values())
        return results

    @classmethod
    def validate_slug(cls, slug: str) -> bool:
        return cls.PATTERNS['slug'].match(slug) is not None

    @classmethod
    def validate_phone_number(cls, phone: str) -> bool:
        return cls.PATTERNS['phone'].match(phone.strip()) is not None
