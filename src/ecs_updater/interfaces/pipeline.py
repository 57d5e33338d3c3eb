"""Stage interfaces for the image rollout pipeline.

Each stage sits behind its own narrow interface so the orchestrator can be
assembled from substitutes (fakes in tests, alternative providers).
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from ecs_updater.interfaces.ecs_types import ServiceDescriptor

if TYPE_CHECKING:
    from ecs_updater.core.models import PipelineRequest, WaitState

ProgressCallback = Callable[[str], None]


class Locator(ABC):
    """Resolves and fetches the task definition currently in use."""

    @abstractmethod
    async def locate_current(self, request: "PipelineRequest") -> dict[str, Any]:
        """Fetch the current task definition for a request's target.

        Args:
            request: Pipeline request carrying the addressing mode

        Returns:
            Full task definition document

        Raises:
            ConfigurationError: If the request has no addressing mode
            NotFoundError: If the service or family member cannot be found
            RemoteError: If a remote call fails
        """


class Transformer(ABC):
    """Produces a registrable copy of a task definition with new images."""

    @abstractmethod
    def apply_image(
        self,
        document: dict[str, Any],
        container_names: str | list[str] | tuple[str, ...],
        image: str,
    ) -> dict[str, Any]:
        """Return a copy of ``document`` with ``image`` set on the named containers.

        Raises:
            ContainerNotFoundError: If any named container is missing
        """


class Publisher(ABC):
    """Registers task definition documents."""

    @abstractmethod
    async def publish(self, document: dict[str, Any]) -> dict[str, Any]:
        """Register ``document`` and return the stored revision.

        Raises:
            RemoteError: If registration fails
        """


class Repointer(ABC):
    """Points a running service at a task definition."""

    @abstractmethod
    async def repoint(
        self, cluster: str | None, service_name: str, revision_arn: str
    ) -> ServiceDescriptor:
        """Start a rolling update of ``service_name`` towards ``revision_arn``.

        Raises:
            RemoteError: If the update is rejected
        """


class Waiter(ABC):
    """Waits for a service rollout to reach a terminal state."""

    @abstractmethod
    async def wait(
        self,
        cluster: str | None,
        service_name: str,
        revision_arn: str,
        on_progress: ProgressCallback | None = None,
    ) -> "WaitState":
        """Poll until the rollout converges or the revision is superseded.

        Returns:
            WaitState.CONVERGED or WaitState.SUPERSEDED

        Raises:
            RemoteError: If polling fails
            WaitTimeoutError: If a configured ceiling is exceeded
        """
