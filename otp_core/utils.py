"""
Phone Utilities
===============
Recipient validation and log-safe masking.
"""

import re
from typing import Optional, Pattern, Union

from .exceptions import ValidationError

# Cambodian numbers with country code, as accepted by the PlasGate deployment
DEFAULT_RECIPIENT_PATTERN = r"^855\d{8,9}$"


def mask_phone(phone: str) -> str:
    """
    Mask a phone number for safe logging.

    Args:
        phone: Phone number

    Returns:
        Masked number (e.g., "855*****678")
    """
    if not phone:
        return "****"
    if len(phone) <= 6:
        return "*" * len(phone)
    return phone[:3] + "*" * (len(phone) - 6) + phone[-3:]


def validate_recipient(
    phone: Optional[str],
    pattern: Union[str, Pattern[str]] = DEFAULT_RECIPIENT_PATTERN,
) -> str:
    """
    Validate a recipient phone number.

    Args:
        phone: Raw phone number from the caller
        pattern: Regex the number must fully match

    Returns:
        The phone number, stripped of surrounding whitespace

    Raises:
        ValidationError: If the number is missing or malformed
    """
    if isinstance(phone, str):
        phone = phone.strip()
    if not phone or not isinstance(phone, str) or not re.match(pattern, phone):
        raise ValidationError(
            "Invalid phone number. Must be in format: 855XXXXXXXX",
            field="phone_number",
        )
    return phone
