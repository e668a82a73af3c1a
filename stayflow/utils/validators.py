"""Custom validation utilities."""

import re


def normalize_account_reference(reference: str | None) -> str:
    """Normalize a payment account reference.

    Removes surrounding whitespace and inner spaces/dashes, so
    ``"1234 5678-90"`` and ``"1234567890"`` are the same account.

    Args:
        reference: Account reference as typed by the user

    Returns:
        str: Normalized reference, empty if nothing was given
    """
    if not reference:
        return ""
    return re.sub(r"[\s\-]", "", reference.strip())


def mask_sensitive_data(data: str, visible_chars: int = 4) -> str:
    """Mask sensitive data showing only last few characters.

    Args:
        data: Sensitive data to mask
        visible_chars: Number of characters to show at end

    Returns:
        str: Masked string like '********7890'
    """
    if len(data) <= visible_chars:
        return "*" * len(data)

    masked_length = len(data) - visible_chars
    return "*" * masked_length + data[-visible_chars:]
