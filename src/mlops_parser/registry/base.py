"""Registry service protocol.

The ingestion engine only needs three write operations. Implementations may
be local (InMemoryRegistry) or a client for a remote model service; code
against RegistryService.

Failures are reported by raising RegistryError. The dispatcher records them
as per-item failures and keeps going.
"""

from __future__ import annotations

import contextlib
import logging
from abc import abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Protocol, TypeVar, runtime_checkable

logger = logging.getLogger(__name__)

# Status codes carried by RegistryError. Negative errno-style values.
STATUS_ERROR = -1
STATUS_NOT_FOUND = -2
STATUS_INVALID = -22
STATUS_UNAVAILABLE = -38


class RegistryError(Exception):
    """A registry operation failed."""

    def __init__(self, message: str, status: int = STATUS_ERROR):
        self.status = status
        super().__init__(message)


@dataclass(frozen=True)
class ModelRecord:
    """One registered version of a model."""

    name: str
    version: int
    path: str
    active: bool
    description: str = ""
    app_info: str = ""


@dataclass(frozen=True)
class ResourceRecord:
    """One registered resource path."""

    name: str
    path: str
    description: str = ""
    app_info: str = ""


@runtime_checkable
class RegistryService(Protocol):
    """Write interface the dispatcher drives.

    Implementations: InMemoryRegistry
    """

    # -------------------------------------------------------------------------
    # Connection
    # -------------------------------------------------------------------------

    @abstractmethod
    def connect(self) -> None:
        """Acquire the connection to the service."""
        ...

    @abstractmethod
    def disconnect(self) -> None:
        """Release the connection."""
        ...

    @abstractmethod
    def is_connected(self) -> bool:
        ...

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    @abstractmethod
    def register_model(
        self, name: str, path: str, active: bool, description: str, app_info: str
    ) -> int:
        """Register a model file. Returns the version assigned to it."""
        ...

    @abstractmethod
    def set_pipeline_description(self, name: str, description: str) -> None:
        """Store (or replace) the pipeline description for a name."""
        ...

    @abstractmethod
    def add_resource(self, name: str, path: str, description: str, app_info: str) -> None:
        """Add one resource path under a name."""
        ...


R = TypeVar("R", bound=RegistryService)


@contextlib.contextmanager
def registry_session(registry: R) -> Iterator[R]:
    """Hold a registry connection for the duration of the block.

    Connects if the registry is not already connected, and disconnects on
    exit only in that case, so an outer session keeps its connection.
    """
    opened = not registry.is_connected()
    if opened:
        registry.connect()
        logger.debug("Registry connected: %s", type(registry).__name__)
    try:
        yield registry
    finally:
        if opened:
            registry.disconnect()
            logger.debug("Registry disconnected: %s", type(registry).__name__)
