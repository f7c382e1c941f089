"""Shared validation utilities"""

import re
from typing import Optional


def normalize_phone(phone: Optional[str], default_country_code: str = "1") -> Optional[str]:
    """
    Normalize a phone number to E.164 format.

    Args:
        phone: Phone number string in various formats
        default_country_code: Prepended to 10-digit national numbers

    Returns:
        Normalized phone number (+CCXXXXXXXXXX)

    Raises:
        ValueError: If phone number is invalid
    """
    if not phone:
        return phone

    has_plus = phone.strip().startswith("+")
    digits = re.sub(r"\D", "", phone)

    if not has_plus and len(digits) == 10:
        digits = f"{default_country_code}{digits}"

    # E.164 allows at most 15 digits
    if not 11 <= len(digits) <= 15:
        raise ValueError(f"Invalid phone number: {phone}")

    return f"+{digits}"
