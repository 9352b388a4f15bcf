"""Outbound client for the GitHub repository dispatch API."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import aiohttp

from dispatch_relay.errors import DispatchError

if TYPE_CHECKING:
    from dispatch_relay.config import RelayConfig
    from dispatch_relay.relay.models import DispatchEnvelope

logger = logging.getLogger(__name__)

GITHUB_ACCEPT = "application/vnd.github+json"


class GitHubDispatcher:
    """Sends one ``repository_dispatch`` event per call.

    A fresh ``aiohttp.ClientSession`` is opened for every dispatch, so the
    dispatcher holds no connection state between requests. No retries and no
    explicit timeout: aiohttp's client defaults apply.
    """

    def __init__(self, config: RelayConfig) -> None:
        self._url = config.dispatch_url
        self._repository = config.repository
        self._headers = {
            "Authorization": f"Bearer {config.gh_token}",
            "Accept": GITHUB_ACCEPT,
            "Content-Type": "application/json",
        }

    @property
    def url(self) -> str:
        return self._url

    async def dispatch(self, envelope: DispatchEnvelope) -> int:
        """POST *envelope* to the dispatch endpoint and return the response status.

        Raises:
            DispatchError: GitHub answered with a non-2xx status; carries the raw body text.
            aiohttp.ClientError: The request failed at the transport level.
        """
        body = envelope.model_dump_json()
        logger.debug("Dispatching %s to %s", envelope.event_type, self._repository)
        async with (
            aiohttp.ClientSession(headers=self._headers) as session,
            session.post(self._url, data=body) as resp,
        ):
            if not 200 <= resp.status < 300:
                text = await resp.text()
                raise DispatchError(resp.status, text)
            logger.debug("Dispatch accepted status=%d", resp.status)
            return resp.status
