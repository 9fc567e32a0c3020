"""
OTP Hashing
===========
Salted hashing so stored challenges never hold the plaintext code.
"""

import hashlib
import hmac
import secrets


def generate_salt() -> str:
    """Generate a random per-challenge salt."""
    return secrets.token_hex(16)


def hash_otp(otp: str, salt: str) -> str:
    """
    Hash an OTP with salt using SHA-256.

    Args:
        otp: Plain OTP
        salt: Random salt

    Returns:
        Hex digest
    """
    return hashlib.sha256(f"{salt}:{otp}".encode()).hexdigest()


def verify_otp_hash(otp: str, salt: str, stored_hash: str) -> bool:
    """Constant-time check of a submitted OTP against its stored hash."""
    return hmac.compare_digest(hash_otp(otp, salt), stored_hash)
