"""Registration of task definition revisions."""

from typing import Any

from ecs_updater.interfaces.pipeline import Publisher
from ecs_updater.interfaces.service_provider import ServiceProvider
from ecs_updater.utils.logging import get_logger

logger = get_logger(__name__)


class RevisionPublisher(Publisher):
    """Registers a transformed task definition as a new revision."""

    def __init__(self, provider: ServiceProvider):
        self.provider = provider

    async def publish(self, document: dict[str, Any]) -> dict[str, Any]:
        registered = await self.provider.register_revision(document)
        logger.info(
            "revision_published",
            family=registered.get("family"),
            task_definition_arn=registered.get("taskDefinitionArn"),
        )
        return registered
