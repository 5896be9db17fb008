"""Phone number utilities for consistent handling across the application."""

import re
from typing import Any

MIN_INTERNATIONAL_DIGITS = 6
MAX_INTERNATIONAL_DIGITS = 15


def normalize_phone(value: Any) -> str | None:
    """Canonicalize a phone-number-like value so numbers can be compared.

    Everything except digits and ``+`` is stripped. A bare run of 6-15 digits
    is assumed to already carry its country code and gets a ``+`` prefix.

    Examples:
        "+61 (2) 9876-5432" → +61298765432
        61298765432         → +61298765432
        "12345"             → 12345

    Returns:
        Normalized phone string, or None when the value holds no digits
    """
    if value is None or value == "":
        return None

    cleaned = re.sub(r"[^\d+]", "", str(value))
    digits = re.sub(r"\D", "", cleaned)
    if not digits:
        return None

    if cleaned.startswith("+"):
        return f"+{digits}"
    if MIN_INTERNATIONAL_DIGITS <= len(digits) <= MAX_INTERNATIONAL_DIGITS:
        return f"+{digits}"
    return digits
