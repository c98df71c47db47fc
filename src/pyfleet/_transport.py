"""JSON-over-HTTP transport."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from pyfleet._constants import USER_AGENT
from pyfleet._redact import redact_for_log, redact_url
from pyfleet.config import FleetConfig
from pyfleet.exceptions import FleetTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles/mocks while
    keeping the production implementation (`HttpTransport`) concrete.
    """

    async def get_json(self, url: str, *, params: Mapping[str, str] | None = None) -> Any:
        ...


class HttpTransport:
    """HTTP transport that fetches and decodes JSON documents."""

    def __init__(
        self,
        config: FleetConfig,
        http_session: aiohttp.ClientSession,
    ) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    async def get_json(self, url: str, *, params: Mapping[str, str] | None = None) -> Any:
        """GET *url* and return the decoded JSON body.

        Raises
        ------
        FleetTransportError
            On network errors, non-200 responses and invalid JSON.  The
            error's ``endpoint`` is the redacted URL.
        """
        endpoint = redact_url(url)
        headers: dict[str, str] = {
            "accept": "application/json",
            "user-agent": USER_AGENT,
        }

        _logger.debug("GET %s params=%s", endpoint, redact_for_log(dict(params or {}), max_string=128))

        try:
            async with self._http.get(url, params=params, headers=headers, timeout=self._timeout) as resp:
                text = await resp.text()
                if resp.status != 200:
                    raise FleetTransportError(
                        f"HTTP {resp.status} from {endpoint}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except FleetTransportError:
            raise
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise FleetTransportError(
                f"Request to {endpoint} failed: {exc!r}",
                endpoint=endpoint,
            ) from exc

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise FleetTransportError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                endpoint=endpoint,
            ) from exc
