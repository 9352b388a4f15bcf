"""Project-level exception hierarchy."""


class RelayError(Exception):
    """Base for all dispatch-relay exceptions."""


class ConfigError(RelayError):
    """Required configuration is missing or invalid."""


class DispatchError(RelayError):
    """The upstream dispatch API rejected the event."""

    def __init__(self, status: int, body: str) -> None:
        super().__init__(f"Dispatch rejected with status {status}: {body}")
        self.status = status
        self.body = body
