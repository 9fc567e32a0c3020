"""
OTP Code Generator
==================
Numeric one-time codes from the operating system's secure random source.
"""

import secrets

from ..exceptions import RandomSourceUnavailable

DIGITS = "0123456789"

# Largest multiple of 10 that fits in a byte; bytes at or above it are redrawn
# so every digit is equally likely.
_BYTE_CUTOFF = 250


def _random_bytes(count: int) -> bytes:
    try:
        return secrets.token_bytes(count)
    except NotImplementedError as e:
        raise RandomSourceUnavailable("Secure random source is unavailable") from e


def generate_otp(length: int = 6) -> str:
    """
    Generate a secure random numeric OTP.

    Each digit is a random byte reduced modulo 10.

    Args:
        length: Number of digits

    Returns:
        OTP string of exactly ``length`` digits

    Raises:
        ValueError: If length is not positive
        RandomSourceUnavailable: If the OS cannot supply secure randomness
    """
    if length < 1:
        raise ValueError(f"OTP length must be positive, got {length}")

    digits = []
    while len(digits) < length:
        for byte in _random_bytes(length - len(digits)):
            if byte < _BYTE_CUTOFF:
                digits.append(DIGITS[byte % 10])
    return "".join(digits)
