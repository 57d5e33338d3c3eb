"""ECS adapter implementing ServiceProvider interface."""

import asyncio
from collections.abc import Callable
from typing import Any, TypeVar

from botocore.exceptions import BotoCoreError

from ecs_updater.clients.ecs_client import ECSClient
from ecs_updater.core.config import RateLimitsConfig
from ecs_updater.core.exceptions import ECSError
from ecs_updater.interfaces.ecs_types import ServiceDescriptor
from ecs_updater.interfaces.service_provider import ServiceProvider
from ecs_updater.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class ECSAdapter(ServiceProvider):
    """Adapter wrapping ECSClient to implement ServiceProvider interface.

    Each blocking boto3 call runs in a worker thread, so independent calls
    awaited together overlap.
    """

    def __init__(
        self,
        region: str = "us-east-1",
        profile: str | None = None,
        client: ECSClient | None = None,
        rate_limits: RateLimitsConfig | None = None,
    ):
        """Initialize ECS adapter.

        Args:
            region: AWS region
            profile: AWS profile name (optional)
            client: Existing ECSClient (optional, overrides region/profile)
            rate_limits: Limits for the ECS API bucket
        """
        self.client = client or ECSClient(
            region=region, profile=profile, rate_limits=rate_limits
        )
        logger.debug("ecs_adapter_initialized", region=self.client.region)

    async def _call(self, operation: str, func: Callable[..., T], *args: Any) -> T:
        try:
            return await asyncio.to_thread(func, *args)
        except ECSError:
            raise
        except BotoCoreError as e:
            logger.error("ecs_call_failed", operation=operation, error=str(e))
            raise ECSError(f"ECS {operation} failed: {e}") from e
        except (TimeoutError, ValueError) as e:
            # Raised by the rate limiter before the request is sent.
            logger.error("ecs_call_throttled", operation=operation, error=str(e))
            raise ECSError(f"ECS {operation} not sent: {e}") from e

    async def describe_service(
        self, cluster: str | None, service_name: str
    ) -> ServiceDescriptor | None:
        services = await self._call(
            "describe_services", self.client.describe_services, cluster, [service_name]
        )

        service = next((s for s in services if s.get("serviceName") == service_name), None)
        if service is None:
            return None
        return ServiceDescriptor.from_api(service)

    async def list_revisions(self, family: str) -> list[str]:
        return await self._call(
            "list_task_definitions", self.client.list_task_definitions, family
        )

    async def describe_revision(self, revision_arn: str) -> dict[str, Any]:
        return await self._call(
            "describe_task_definition", self.client.describe_task_definition, revision_arn
        )

    async def register_revision(self, document: dict[str, Any]) -> dict[str, Any]:
        return await self._call(
            "register_task_definition", self.client.register_task_definition, document
        )

    async def update_service(
        self, cluster: str | None, service_name: str, revision_arn: str
    ) -> ServiceDescriptor:
        service = await self._call(
            "update_service", self.client.update_service, cluster, service_name, revision_arn
        )
        return ServiceDescriptor.from_api(service)
