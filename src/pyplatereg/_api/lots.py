"""Lot endpoints.

Endpoints:
  - /get-lot     (lot configuration, including the registry flag)
  - /update-lot  (partial lot update; only ``registryOn`` is sent)
"""

from __future__ import annotations

import logging

from pyplatereg._api._common import raise_for_body, unwrap_data
from pyplatereg._constants import COMMIT_LOT_ENDPOINT, LOT_CONFIG_ENDPOINT
from pyplatereg._transport import Transport
from pyplatereg.exceptions import RegistryApiError
from pyplatereg.models.lot import LotConfig
from pyplatereg.models.requests import LotFlagUpdate, LotRequest, UpdateLotRequest
from pyplatereg.session import Session

_logger = logging.getLogger(__name__)


async def fetch_lot_config(session: Session, transport: Transport, lot_id: str) -> LotConfig:
    """Fetch the configuration of *lot_id*."""
    request = LotRequest(lot_id=lot_id)
    body = await transport.get_json(
        LOT_CONFIG_ENDPOINT,
        {"lotId": request.lot_id, "customerId": session.customer_id},
    )
    raise_for_body(LOT_CONFIG_ENDPOINT, body)
    data = unwrap_data(body)
    if not isinstance(data, dict):
        raise RegistryApiError(
            f"{LOT_CONFIG_ENDPOINT} returned {type(data).__name__}, expected an object",
            code="invalid_payload",
            endpoint=LOT_CONFIG_ENDPOINT,
        )
    config = LotConfig.model_validate(data)
    if not config.lot_id:
        config = config.model_copy(update={"lot_id": request.lot_id})
    return config


async def update_registry_flag(transport: Transport, lot_id: str, *, registry_on: bool) -> None:
    """Persist the registry enable flag of *lot_id*."""
    request = UpdateLotRequest(lot_id=lot_id, updated_data=LotFlagUpdate(registry_on=registry_on))
    body = await transport.post_json(COMMIT_LOT_ENDPOINT, request.to_payload())
    raise_for_body(COMMIT_LOT_ENDPOINT, body)
    _logger.debug("Registry flag updated lot=%s registry_on=%s", lot_id, registry_on)
