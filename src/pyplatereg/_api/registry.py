"""Vehicle registry endpoints.

Endpoints:
  - /get-vehicle-registry     (entries of one lot)
  - /update-vehicle-registry  (replace-all write of the submitted entries)
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from pyplatereg._api._common import raise_for_body, unwrap_data
from pyplatereg._constants import COMMIT_ROWS_ENDPOINT, REGISTRY_ROWS_ENDPOINT
from pyplatereg._transport import Transport
from pyplatereg.exceptions import RegistryApiError
from pyplatereg.models.requests import LotRequest
from pyplatereg.models.row import RegistryEntry
from pyplatereg.session import Session

_logger = logging.getLogger(__name__)


async def fetch_registry_entries(session: Session, transport: Transport, lot_id: str) -> list[RegistryEntry]:
    """Fetch the persisted registry entries of *lot_id*.

    Entries tagged with another lot are dropped; the backend is expected
    to filter, but the editor must never show foreign rows.
    """
    request = LotRequest(lot_id=lot_id)
    body = await transport.get_json(
        REGISTRY_ROWS_ENDPOINT,
        {"lotId": request.lot_id, "customerId": session.customer_id},
    )
    raise_for_body(REGISTRY_ROWS_ENDPOINT, body)
    items = unwrap_data(body)
    if not isinstance(items, list):
        raise RegistryApiError(
            f"{REGISTRY_ROWS_ENDPOINT} returned {type(items).__name__}, expected a list",
            code="invalid_payload",
            endpoint=REGISTRY_ROWS_ENDPOINT,
        )

    entries: list[RegistryEntry] = []
    for item in items:
        entry = RegistryEntry.model_validate(item)
        if entry.lot_id and entry.lot_id != request.lot_id:
            continue
        if not entry.lot_id:
            entry = entry.model_copy(update={"lot_id": request.lot_id})
        entries.append(entry)
    _logger.debug("Loaded %d registry entries for lot=%s", len(entries), request.lot_id)
    return entries


async def replace_registry_entries(transport: Transport, entries: Sequence[RegistryEntry]) -> None:
    """Send the full entry set; the backend replaces what it had."""
    payload = [entry.to_payload() for entry in entries]
    body = await transport.post_json(COMMIT_ROWS_ENDPOINT, payload)
    raise_for_body(COMMIT_ROWS_ENDPOINT, body)
    _logger.debug("Registry replaced with %d entries", len(payload))
