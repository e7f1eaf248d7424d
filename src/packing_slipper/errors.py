"""Exception types raised while building a packing slip."""

from __future__ import annotations

from pathlib import Path


class PackingSlipError(Exception):
    """Base class for every failure that aborts a run."""


class ConfigError(PackingSlipError):
    """Raised when a configuration or secrets file cannot be loaded."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class SecretsDecryptionError(ConfigError):
    """Raised when sops fails to decrypt the secrets file."""

    def __init__(self, message: str, *, path: Path | None = None, stderr: str = "") -> None:
        super().__init__(message, path=path)
        self.stderr = stderr


class OrderFetchError(PackingSlipError):
    """Raised when the order list cannot be fetched from the store API."""


class OrderNotFoundError(OrderFetchError):
    """Raised when the requested offset is outside the returned order list."""

    def __init__(self, offset: int, available: int) -> None:
        super().__init__(
            f"order offset {offset} is out of range ({available} orders returned)"
        )
        self.offset = offset
        self.available = available


class RenderError(PackingSlipError):
    """Raised when the label cannot be drawn or written."""
