"""
Authentication Module
Admin key hashing and JWT session management
"""

from app.auth.password import hash_password, verify_password
from app.auth.dependencies import (
    create_access_token,
    decode_access_token,
    get_current_admin,
)

__all__ = [
    "hash_password",
    "verify_password",
    "create_access_token",
    "decode_access_token",
    "get_current_admin",
]
