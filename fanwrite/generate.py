import secrets
import string
from datetime import datetime, timezone

ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits

KEY_FOLDER_FORMAT = "%Y%m%dT%H%M%S"


def generate_key() -> str:
    """Build a fresh object key of the form ``<utc second>/<32 hex chars>``.

    The folder groups every object created within the same second, the
    suffix comes from 16 bytes of OS entropy.
    """
    folder = datetime.now(timezone.utc).strftime(KEY_FOLDER_FORMAT)
    return f"{folder}/{secrets.token_hex(16)}"


def generate_content(length: int) -> str:
    """Random alphanumeric string of exactly ``length`` characters."""
    # byte % 62, so the first 8 symbols are marginally more likely
    return "".join(ALPHABET[b % len(ALPHABET)] for b in secrets.token_bytes(length))
