"""Address syntax check. No DNS here; see probe.py for the network gates."""

import re

# Exactly one @, non-empty local part, dot-separated domain, no whitespace
EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")


def is_valid_format(address: str) -> bool:
    """Return True if the address passes the conservative syntax pattern."""
    if not isinstance(address, str):
        return False
    return EMAIL_PATTERN.fullmatch(address) is not None


def extract_domain(address: str) -> str:
    """Return the domain part of an address that passed is_valid_format."""
    return address.rsplit("@", 1)[1]
