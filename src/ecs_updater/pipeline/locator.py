"""Resolution of the task definition currently in use."""

import asyncio
from typing import TYPE_CHECKING, Any

from ecs_updater.core.exceptions import ConfigurationError, NotFoundError
from ecs_updater.core.models import FamilyTarget, ServiceTarget
from ecs_updater.interfaces.pipeline import Locator
from ecs_updater.interfaces.service_provider import ServiceProvider
from ecs_updater.utils.logging import get_logger

if TYPE_CHECKING:
    from ecs_updater.core.models import PipelineRequest

logger = get_logger(__name__)


class RevisionLocator(Locator):
    """Finds the current task definition by service or by family.

    Both lookups are started together; the one that does not match the
    request's addressing mode resolves to None without a remote call.
    """

    def __init__(self, provider: ServiceProvider):
        """Initialize revision locator.

        Args:
            provider: Remote service provider
        """
        self.provider = provider

    async def latest_active_revision(self, target: Any) -> str | None:
        """Return the newest ACTIVE task definition ARN for a family target.

        Raises:
            NotFoundError: If the family has no ACTIVE task definitions
        """
        if not isinstance(target, FamilyTarget):
            return None

        arns = await self.provider.list_revisions(target.family)
        if not arns:
            raise NotFoundError(f'No Task Definitions found in family "{target.family}"')

        logger.debug("latest_revision_found", family=target.family, task_definition_arn=arns[0])
        return arns[0]

    async def service_revision(self, target: Any) -> str | None:
        """Return the task definition ARN a service target is running.

        Raises:
            NotFoundError: If the service does not exist
        """
        if not isinstance(target, ServiceTarget):
            return None

        service = await self.provider.describe_service(target.cluster, target.service_name)
        if service is None:
            raise NotFoundError(f'Could not find service "{target.service_name}"')
        if not service.current_revision_arn:
            raise NotFoundError(
                f'Service "{target.service_name}" has no service-level task definition'
            )

        logger.debug(
            "service_revision_found",
            service=target.service_name,
            task_definition_arn=service.current_revision_arn,
        )
        return service.current_revision_arn

    async def locate_current(self, request: "PipelineRequest") -> dict[str, Any]:
        return await self.locate(request.target)

    async def locate(self, target: Any) -> dict[str, Any]:
        """Resolve and describe the task definition currently used by a target.

        Raises:
            ConfigurationError: If the target is neither a service nor a family
            NotFoundError: If no current task definition exists
        """
        if not isinstance(target, (ServiceTarget, FamilyTarget)):
            raise ConfigurationError(
                "Ensure either the service name or task definition family is specified"
            )

        results = await asyncio.gather(
            self.latest_active_revision(target),
            self.service_revision(target),
        )

        revision_arn = next((arn for arn in results if arn), None)
        if not revision_arn:
            raise NotFoundError("Could not find current task definition")

        document = await self.provider.describe_revision(revision_arn)
        logger.info("current_revision_located", task_definition_arn=revision_arn)
        return document
