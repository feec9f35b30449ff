import re
from typing import Final

from library_api.core.errors import BadRequestError

EMAIL_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
)

# Largest value an INTEGER primary key column holds
MAX_ID: Final[int] = 2**31 - 1


def is_valid_email(email: str) -> bool:
    return EMAIL_PATTERN.match(email) is not None


def parse_id(raw: str, entity: str) -> int:
    """
    Turn a path segment into a positive integer id.
    Raises BadRequestError for empty, malformed or out-of-range values.
    """
    raw = raw.strip()
    if not raw:
        raise BadRequestError(f"Enter {entity} ID")
    if not (raw.isascii() and raw.isdigit()):
        raise BadRequestError(f"Invalid {entity} ID")
    value = int(raw)
    if not 0 < value <= MAX_ID:
        raise BadRequestError(f"Invalid {entity} ID")
    return value
