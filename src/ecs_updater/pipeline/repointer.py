"""Repointing services at a new task definition."""

from ecs_updater.interfaces.ecs_types import ServiceDescriptor
from ecs_updater.interfaces.pipeline import Repointer
from ecs_updater.interfaces.service_provider import ServiceProvider
from ecs_updater.utils.logging import get_logger

logger = get_logger(__name__)


class ServiceRepointer(Repointer):
    """Starts a rolling update; returns once ECS accepts it."""

    def __init__(self, provider: ServiceProvider):
        self.provider = provider

    async def repoint(
        self, cluster: str | None, service_name: str, revision_arn: str
    ) -> ServiceDescriptor:
        service = await self.provider.update_service(cluster, service_name, revision_arn)
        logger.info(
            "service_repointed",
            cluster=cluster,
            service=service_name,
            task_definition_arn=revision_arn,
            deployments=len(service.deployments),
        )
        return service
