"""
UserHub Backend — Identifier Rules
====================================

What:  Parses and validates entity identifiers (128-bit UUIDs).
Who:   Called by every repository operation that takes an identifier,
       before any storage is touched.

Accepted textual form:
    The canonical hyphenated 8-4-4-4-12 hex layout, case-insensitive
    (e.g. "11111111-1111-1111-1111-111111111111"). Braces, URNs and
    un-hyphenated hex are rejected so one record has exactly one URL.
"""

import re
import uuid
from typing import Union

from userhub.shared.exceptions import InvalidIdentifierError

Identifier = Union[str, uuid.UUID]

_CANONICAL_UUID = re.compile(
    r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"
)


def parse_identifier(value: Identifier) -> uuid.UUID:
    """
    Convert a raw identifier into a UUID.

    Returns:
        The parsed UUID. UUID instances are returned unchanged.

    Raises:
        InvalidIdentifierError: value is not a UUID or a canonical UUID string.
    """
    if isinstance(value, uuid.UUID):
        return value
    if not isinstance(value, str) or not _CANONICAL_UUID.fullmatch(value):
        raise InvalidIdentifierError(value=value)
    return uuid.UUID(value)


def new_identifier() -> uuid.UUID:
    """Fresh random identifier, assigned once at entity-creation time."""
    return uuid.uuid4()
