import re
from token_service.tokens.constants import MAX_USER_ID, USER_ID_PATTERN

_MAX_DIGITS = len(str(MAX_USER_ID))


def is_valid_user_id(raw: str) -> bool:
    """Decimal digits only and within the signed 64-bit range."""
    if not re.fullmatch(USER_ID_PATTERN, raw):
        return False
    # bound the length before int() so oversized strings are never converted
    if len(raw.lstrip("0")) > _MAX_DIGITS:
        return False
    return int(raw) <= MAX_USER_ID
