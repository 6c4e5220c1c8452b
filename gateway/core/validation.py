"""Input shape checks shared by request parsing and query building."""

import re

# local-part@domain.tld, no whitespace and a single @
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def is_valid_email(value: str) -> bool:
    return isinstance(value, str) and EMAIL_PATTERN.fullmatch(value) is not None
