"""High-level async client for the lot management backend."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, Protocol

import aiohttp

from pyplatereg._api import lots as _lots_api
from pyplatereg._api import registry as _registry_api
from pyplatereg._transport import JsonTransport, Transport
from pyplatereg.config import RegistryConfig
from pyplatereg.exceptions import RegistryError
from pyplatereg.models.lot import LotConfig
from pyplatereg.models.row import RegistryEntry
from pyplatereg.session import Session

_logger = logging.getLogger(__name__)


class RegistryBackend(Protocol):
    """Persistence collaborator consumed by the registry editor."""

    async def get_lot_config(self, lot_id: str) -> LotConfig:
        ...

    async def get_registry_rows(self, lot_id: str) -> list[RegistryEntry]:
        ...

    async def commit_registry_rows(self, entries: Sequence[RegistryEntry]) -> None:
        ...

    async def commit_lot_flag(self, lot_id: str, *, registry_on: bool) -> None:
        ...


class RegistryClient:
    """Async client for the registry persistence endpoints.

    Usage::

        async with RegistryClient(config, session) as client:
            lot = await client.get_lot_config(session.lot_id)
            entries = await client.get_registry_rows(session.lot_id)
    """

    def __init__(
        self,
        config: RegistryConfig,
        session: Session,
        *,
        http_session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._config = config
        self._session = session
        self._external_session = http_session is not None
        self._http_session = http_session
        self._transport: Transport | None = None

    @property
    def session(self) -> Session:
        return self._session

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> RegistryClient:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = JsonTransport(self._config, self._session, self._http_session)
        _logger.debug("Registry client ready base_url=%s lot=%s", self._config.base_url, self._session.lot_id)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise RegistryError("Client not initialized. Use 'async with RegistryClient(...) as client:'")
        return self._transport

    # ------------------------------------------------------------------
    # Loads
    # ------------------------------------------------------------------

    async def get_lot_config(self, lot_id: str) -> LotConfig:
        """Fetch lot settings, including the server-side registry flag."""
        return await _lots_api.fetch_lot_config(self._session, self._require_transport(), lot_id)

    async def get_registry_rows(self, lot_id: str) -> list[RegistryEntry]:
        """Fetch the persisted registry entries of *lot_id*."""
        return await _registry_api.fetch_registry_entries(self._session, self._require_transport(), lot_id)

    # ------------------------------------------------------------------
    # Commits
    # ------------------------------------------------------------------

    async def commit_registry_rows(self, entries: Sequence[RegistryEntry]) -> None:
        """Replace the persisted registry with *entries*."""
        await _registry_api.replace_registry_entries(self._require_transport(), entries)

    async def commit_lot_flag(self, lot_id: str, *, registry_on: bool) -> None:
        """Persist the registry enable flag for *lot_id*."""
        await _lots_api.update_registry_flag(self._require_transport(), lot_id, registry_on=registry_on)
