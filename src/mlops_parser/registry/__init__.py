"""Registry service: where manifest items end up.

Architecture:
    RegistryService protocol → register_model / set_pipeline_description / add_resource
    registry_session()       → scoped connect/disconnect around one ingestion

Implementations:
    InMemoryRegistry (dicts; full model interface)
"""

from mlops_parser.registry.base import (
    ModelRecord,
    RegistryError,
    RegistryService,
    ResourceRecord,
    registry_session,
)
from mlops_parser.registry.memory import InMemoryRegistry

__all__ = [
    "InMemoryRegistry",
    "ModelRecord",
    "RegistryError",
    "RegistryService",
    "ResourceRecord",
    "registry_session",
]
