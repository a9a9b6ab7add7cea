"""Storage key generation for uploaded files."""

import re
import time
import uuid
from collections.abc import Callable
from typing import Final

_UNSAFE_CHARACTERS: Final = re.compile(r'[^A-Za-z0-9._-]')
_REPLACEMENT: Final = '_'


def sanitize_filename(filename: str) -> str:
    """Make a user-supplied filename safe for storage keys and URLs.

    Every character outside ``[A-Za-z0-9._-]`` becomes an underscore,
    one underscore per character.

    Args:
        filename: Original filename (e.g., 'a b?.jpg').

    Returns:
        Sanitized filename (e.g., 'a_b_.jpg').
    """
    return _UNSAFE_CHARACTERS.sub(_REPLACEMENT, filename)


def generate_storage_key(
    original_name: str,
    *,
    clock: Callable[[], float] = time.time,
    token_factory: Callable[[], uuid.UUID] = uuid.uuid4,
) -> str:
    """Build a collision-resistant storage key from a filename.

    The key is ``<unix millis>-<uuid4>-<sanitized name>``. No collision
    check is made, the timestamp and random token make clashes
    practically impossible.

    Args:
        original_name: Filename as sent by the client.
        clock: Returns the current time in seconds.
        token_factory: Returns a random UUID.

    Returns:
        Storage key safe for the provider's folder namespace.
    """
    timestamp_ms = int(clock() * 1000)
    return '{timestamp}-{token}-{name}'.format(
        timestamp=timestamp_ms,
        token=token_factory(),
        name=sanitize_filename(original_name),
    )
