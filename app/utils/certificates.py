"""
Certificate Number Utilities
Generation and format validation for numbers like ECELL-2025-KD93Q
"""

import hashlib
import re
import secrets
import string
from datetime import datetime
from typing import Optional

from app.config import settings

SUFFIX_LENGTH = 5
SUFFIX_ALPHABET = string.ascii_uppercase + string.digits


def generate_certificate_number(prefix: Optional[str] = None, year: Optional[int] = None) -> str:
    """
    Generate a certificate number in the format PREFIX-YYYY-XXXXX

    Args:
        prefix: Number prefix (defaults to CERTIFICATE_PREFIX)
        year: Year component (defaults to the current year)

    Returns:
        Certificate number with a random uppercase alphanumeric suffix
    """
    prefix = prefix or settings.CERTIFICATE_PREFIX
    year = year or datetime.now().year
    suffix = "".join(secrets.choice(SUFFIX_ALPHABET) for _ in range(SUFFIX_LENGTH))
    return f"{prefix}-{year:04d}-{suffix}"


def is_valid_certificate_number(value: str, prefix: Optional[str] = None) -> bool:
    """Check the PREFIX-YYYY-XXXXX shape without touching storage"""
    if not isinstance(value, str):
        return False
    prefix = prefix or settings.CERTIFICATE_PREFIX
    pattern = rf"{re.escape(prefix)}-\d{{4}}-[A-Z0-9]{{{SUFFIX_LENGTH}}}"
    return re.fullmatch(pattern, value) is not None


def normalize_certificate_number(value) -> str:
    return str(value if value is not None else "").strip().upper()


def compute_verification_hash(certificate_number: str, event_id) -> str:
    """sha256 of number + event id. Display/audit value, not a secret."""
    payload = f"{certificate_number}{event_id}".encode("utf-8")
    return hashlib.sha256(payload).hexdigest()
