"""Jerarquía de errores de AGXCL.

Todo fallo del core deriva de `AgxclError`; la CLI lo convierte en un único
mensaje `❌ ...` y exit code 1.
"""

from __future__ import annotations

from typing import Sequence


class AgxclError(Exception):
    """Base class for all AGXCL failures."""


class ConfigError(AgxclError):
    """The project configuration is missing or invalid."""


class ConfigNotFound(ConfigError):
    def __init__(self, path: object) -> None:
        self.path = path
        super().__init__(f'Config file not found: {path}. Run "agxcl init <project>" first.')


class NetworkNotFound(ConfigError):
    def __init__(self, network: str, available: Sequence[str] = ()) -> None:
        self.network = network
        self.available = tuple(available)
        message = f"Network {network} not found in config"
        if self.available:
            message += f" (available: {', '.join(self.available)})"
        super().__init__(message)


class InvalidPayload(AgxclError):
    """A request payload failed validation before being sent."""


class ClientError(AgxclError):
    """A remote call failed.

    `operation` is the user-facing label of the call (e.g. "Contract call
    failed") and `message` the upstream or transport reason.
    """

    def __init__(self, operation: str, message: str) -> None:
        self.operation = operation
        self.message = message
        super().__init__(f"{operation}: {message}")


class TransportFailure(ClientError):
    """Connection error, DNS failure or timeout: no HTTP response was received."""


class RemoteRejection(ClientError):
    """The API answered with a non-success status or an unusable body."""

    def __init__(self, operation: str, message: str, *, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(operation, message)


class InsufficientStake(AgxclError):
    def __init__(self, balance: int, required: int) -> None:
        self.balance = balance
        self.required = required
        super().__init__(
            f"Insufficient AGX balance. Required: {required:,}, Available: {balance:,}"
        )


class ProjectError(AgxclError):
    """Local project layout problems (init/compile/deploy)."""


class ProjectExists(ProjectError):
    def __init__(self, path: object) -> None:
        self.path = path
        super().__init__(f"Directory already exists and is not empty: {path}")


class ContractsDirMissing(ProjectError):
    def __init__(self, path: object) -> None:
        self.path = path
        super().__init__('No contracts directory found. Run "agxcl init <project>" first.')


class ContractNotFound(ProjectError):
    pass
