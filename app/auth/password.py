"""
Admin Key Hashing and Verification
The admin key is stored only as a bcrypt hash (ADMIN_KEY_HASH)
"""

from typing import Optional

from passlib.context import CryptContext

# Password context for hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    """
    Hash a plain admin key

    Args:
        password: Plain text key

    Returns:
        bcrypt hash
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """
    Verify a key against a hash

    Returns:
        True if the key matches, False otherwise (including when no hash is configured)
    """
    if not plain_password or not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)
