"""Interface definitions for the ECS image updater."""

from ecs_updater.interfaces.ecs_types import Deployment, ServiceDescriptor
from ecs_updater.interfaces.pipeline import (
    Locator,
    ProgressCallback,
    Publisher,
    Repointer,
    Transformer,
    Waiter,
)
from ecs_updater.interfaces.service_provider import ServiceProvider

__all__ = [
    "Deployment",
    "ServiceDescriptor",
    "Locator",
    "ProgressCallback",
    "Publisher",
    "Repointer",
    "Transformer",
    "Waiter",
    "ServiceProvider",
]
