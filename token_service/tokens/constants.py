import string
from token_service.common.logging_setup import get_logger

logger = get_logger("livenet.tokens")

TOKEN_LENGTH = 128

SYMBOLS = string.ascii_uppercase + string.ascii_lowercase + string.digits

USER_ID_PATTERN = r"^[0-9]+$"

INVALID_USER_ID = "Invalid user ID"

TOKEN_DELETED = "Token deleted successfully"

# user ids are signed 64-bit
MAX_USER_ID = 2**63 - 1
