"""Trigger relay: HTTP ingress, payload mapping and the GitHub dispatch client."""

from dispatch_relay.relay.github import GitHubDispatcher
from dispatch_relay.relay.models import DispatchEnvelope, TriggerPayload, build_envelope
from dispatch_relay.relay.server import RelayServer

__all__ = [
    "DispatchEnvelope",
    "GitHubDispatcher",
    "RelayServer",
    "TriggerPayload",
    "build_envelope",
]
