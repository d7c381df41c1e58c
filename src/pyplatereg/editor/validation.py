"""Pre-commit shape checks for registry entries."""

from __future__ import annotations

import re
from collections.abc import Iterable

from pyplatereg._constants import MIN_PHONE_DIGITS
from pyplatereg.exceptions import RegistryValidationError
from pyplatereg.models.row import RegistryEntry

_EMAIL_RE = re.compile(r"\S+@\S+\.\S+")
_NON_DIGIT_RE = re.compile(r"\D")


def is_valid_email(email: str) -> bool:
    """Loose ``local@domain.tld`` shape check."""
    return _EMAIL_RE.search(email) is not None


def is_valid_phone(phone: str) -> bool:
    """At least seven digits once separators are stripped."""
    return len(_NON_DIGIT_RE.sub("", phone)) >= MIN_PHONE_DIGITS


def validate_entries(entries: Iterable[RegistryEntry]) -> None:
    """Raise :class:`RegistryValidationError` for the first invalid entry."""
    for entry in entries:
        if not is_valid_email(entry.email):
            raise RegistryValidationError(
                f'Invalid email address in row with plate "{entry.plate}"',
                vehicle_id=entry.vehicle_id,
                plate=entry.plate,
                field="email",
            )
        if not is_valid_phone(entry.phone):
            raise RegistryValidationError(
                f'Invalid phone number in row with plate "{entry.plate}"',
                vehicle_id=entry.vehicle_id,
                plate=entry.plate,
                field="phone",
            )
