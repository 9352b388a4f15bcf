"""Relay HTTP server: aiohttp ingress that turns triggers into GitHub dispatches."""

from __future__ import annotations

import json
import logging
import uuid
from typing import TYPE_CHECKING

from aiohttp import web

from dispatch_relay.errors import DispatchError
from dispatch_relay.log_context import set_log_context
from dispatch_relay.relay.auth import validate_trigger_auth
from dispatch_relay.relay.github import GitHubDispatcher
from dispatch_relay.relay.models import TriggerPayload, build_envelope

if TYPE_CHECKING:
    from dispatch_relay.config import RelayConfig

logger = logging.getLogger(__name__)

TRIGGER_PATH = "/api/llms-full-trigger"
HEALTH_PATH = "/health"

SUCCESS_MESSAGE = "GitHub Action triggered"
INTERNAL_ERROR = "Internal server error"


class RelayServer:
    """HTTP server accepting change notifications and relaying them upstream.

    Routes:
    - ``GET  /health``                -- Health check for tunnel/proxy monitoring.
    - ``POST /api/llms-full-trigger`` -- Authenticated trigger, one dispatch per request.
    """

    def __init__(
        self,
        config: RelayConfig,
        dispatcher: GitHubDispatcher | None = None,
    ) -> None:
        self._config = config
        self._dispatcher = dispatcher or GitHubDispatcher(config)
        self._runner: web.AppRunner | None = None

    def build_app(self) -> web.Application:
        """Create the aiohttp application with all routes registered."""
        app = web.Application(client_max_size=self._config.max_body_bytes)
        app.router.add_get(HEALTH_PATH, self.handle_health)
        app.router.add_post(TRIGGER_PATH, self.handle_trigger)
        return app

    async def start(self) -> None:
        """Build the app and start listening."""
        self._runner = web.AppRunner(self.build_app(), access_log=None)
        await self._runner.setup()
        site = web.TCPSite(self._runner, self._config.host, self._config.port)
        await site.start()
        logger.info(
            "Relay listening on %s:%d, dispatching to %s",
            self._config.host,
            self._config.port,
            self._config.repository,
        )

    async def stop(self) -> None:
        """Shut down the server."""
        if self._runner:
            await self._runner.cleanup()
            self._runner = None
        logger.info("Relay server stopped")

    # -- Handlers --

    async def handle_health(self, _request: web.Request) -> web.Response:
        return web.json_response({"status": "ok"})

    async def handle_trigger(self, request: web.Request) -> web.Response:
        set_log_context(operation="trigger", request_id=uuid.uuid4().hex)
        logger.info("Trigger request received remote=%s", request.remote)

        # 1. Auth
        if not validate_trigger_auth(
            request.headers.get("Authorization"), self._config.trigger_secret
        ):
            logger.warning("Trigger rejected: unauthorized")
            return web.json_response({"error": "Unauthorized"}, status=401)

        try:
            # 2. Parse body; malformed JSON lands in the generic 500 below
            raw = await request.read()
            payload = TriggerPayload.model_validate(json.loads(raw))

            # 3. Envelope
            envelope = build_envelope(payload)

            # 4. Dispatch
            await self._dispatcher.dispatch(envelope)
        except web.HTTPRequestEntityTooLarge:
            logger.warning("Trigger rejected: body exceeds %d bytes", self._config.max_body_bytes)
            raise
        except DispatchError as exc:
            logger.error("GitHub API error status=%d: %s", exc.status, exc.body)
            return web.json_response({"ok": False, "error": exc.body}, status=500)
        except Exception:
            logger.exception("Trigger error")
            return web.json_response({"ok": False, "error": INTERNAL_ERROR}, status=500)

        logger.info("Successfully triggered GitHub Action for %s", self._config.repository)
        return web.json_response({"ok": True, "message": SUCCESS_MESSAGE})
