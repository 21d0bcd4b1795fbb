"""HTTP transport for the update API."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Protocol

import aiohttp

from remote_updater._constants import REQUEST_TIMEOUT, USER_AGENT
from remote_updater._redact import redact_form
from remote_updater.exceptions import UpdaterTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by the remote client.

    Having a protocol here makes it easy to pass test doubles/mocks while
    keeping the production implementation (`HttpTransport`) concrete.
    """

    async def post_form(self, url: str, form: Mapping[str, str]) -> str:
        ...


class HttpTransport:
    """POSTs form-encoded bodies with a fixed timeout and TLS policy.

    The ``aiohttp`` session is created on first use unless one is passed
    in. Only sessions created here are closed by :meth:`close`.
    """

    def __init__(
        self,
        *,
        session: aiohttp.ClientSession | None = None,
        timeout: float = REQUEST_TIMEOUT,
        verify_ssl: bool = False,
    ) -> None:
        self._http = session
        self._external_session = session is not None
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._verify_ssl = verify_ssl

    def _session(self) -> aiohttp.ClientSession:
        if self._http is None or self._http.closed:
            self._http = aiohttp.ClientSession()
            self._external_session = False
        return self._http

    async def post_form(self, url: str, form: Mapping[str, str]) -> str:
        """POST *form* to *url* and return the response text.

        Non-2xx statuses are not errors here: the caller decides whether
        the body is usable.
        """
        _logger.debug("POST %s %s", url, redact_form(form))

        try:
            async with self._session().post(
                url,
                data=dict(form),
                headers={"user-agent": USER_AGENT},
                timeout=self._timeout,
                ssl=self._verify_ssl,
            ) as resp:
                text = await resp.text(errors="replace")
                if resp.status != 200:
                    _logger.debug("HTTP %s from %s: %s", resp.status, url, text[:200])
                return text
        except aiohttp.ClientError as exc:
            raise UpdaterTransportError(f"Request to {url} failed: {exc}", url=url) from exc
        except asyncio.TimeoutError as exc:
            raise UpdaterTransportError(f"Request to {url} timed out", url=url) from exc

    async def close(self) -> None:
        if not self._external_session and self._http is not None:
            await self._http.close()
        self._http = None
