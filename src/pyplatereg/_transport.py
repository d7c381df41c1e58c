"""HTTP transport for the lot management backend."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from pyplatereg._constants import USER_AGENT
from pyplatereg._redact import redact_for_log
from pyplatereg.config import RegistryConfig
from pyplatereg.exceptions import RegistryTransportError
from pyplatereg.session import Session

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles/mocks while
    keeping the production implementation (`JsonTransport`) concrete.
    """

    async def get_json(self, endpoint: str, params: Mapping[str, str]) -> Any:
        ...

    async def post_json(self, endpoint: str, payload: Any) -> Any:
        ...


class JsonTransport:
    """HTTP transport exchanging JSON bodies with the backend."""

    def __init__(
        self,
        config: RegistryConfig,
        session: Session,
        http_session: aiohttp.ClientSession,
    ) -> None:
        self._config = config
        self._session = session
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    def _headers(self) -> dict[str, str]:
        headers: dict[str, str] = {
            "accept": "application/json",
            "content-type": "application/json; charset=UTF-8",
            "user-agent": USER_AGENT,
        }
        if self._session.auth_token:
            headers["authorization"] = f"Bearer {self._session.auth_token}"
        return headers

    def _trace(self, direction: str, endpoint: str, payload: Any) -> None:
        if self._config.api_trace_enabled:
            _logger.debug("%s %s %s", direction, endpoint, redact_for_log(payload))

    async def get_json(self, endpoint: str, params: Mapping[str, str]) -> Any:
        """GET *endpoint* with query *params* and return the decoded JSON body."""
        url = f"{self._config.base_url}{endpoint}"
        _logger.debug("GET %s", url)
        self._trace(">>", endpoint, dict(params))
        text = await self._request("GET", endpoint, url, params=dict(params))
        return self._decode(endpoint, text, allow_empty=False)

    async def post_json(self, endpoint: str, payload: Any) -> Any:
        """POST *payload* as JSON to *endpoint*.

        Returns the decoded JSON body, or ``None`` when the backend sends an
        empty body (the update endpoints only signal success by status).
        """
        url = f"{self._config.base_url}{endpoint}"
        _logger.debug("POST %s", url)
        self._trace(">>", endpoint, payload)
        body = json.dumps(payload, separators=(",", ":"))
        text = await self._request("POST", endpoint, url, data=body)
        return self._decode(endpoint, text, allow_empty=True)

    async def _request(self, method: str, endpoint: str, url: str, **kwargs: Any) -> str:
        try:
            async with self._http.request(
                method,
                url,
                headers=self._headers(),
                timeout=self._timeout,
                **kwargs,
            ) as resp:
                text = await resp.text()
                if not 200 <= resp.status < 300:
                    raise RegistryTransportError(
                        f"HTTP {resp.status} from {endpoint}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except RegistryTransportError:
            raise
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise RegistryTransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc
        return text

    def _decode(self, endpoint: str, text: str, *, allow_empty: bool) -> Any:
        if not text.strip():
            if allow_empty:
                return None
            raise RegistryTransportError(
                f"Empty response payload from {endpoint}",
                endpoint=endpoint,
            )
        try:
            result = json.loads(text)
        except json.JSONDecodeError as exc:
            if allow_empty:
                # Update endpoints may answer with a plain-text acknowledgement.
                return None
            raise RegistryTransportError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                endpoint=endpoint,
            ) from exc
        self._trace("<<", endpoint, result)
        return result
