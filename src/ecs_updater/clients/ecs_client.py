"""AWS client for ECS service and task definition operations."""

from typing import Any, cast

import boto3
from botocore.exceptions import ClientError

from ecs_updater.core.config import RateLimitsConfig
from ecs_updater.core.exceptions import ECSError
from ecs_updater.utils.logging import get_logger
from ecs_updater.utils.rate_limiter import ECS_API, initialize_rate_limiters, rate_limited

logger = get_logger(__name__)


class ECSClient:
    """Thin boto3 wrapper for the ECS calls used by the updater.

    Calls are never retried here: ``register_task_definition`` creates a new
    revision on every call.
    """

    def __init__(
        self,
        region: str = "us-east-1",
        profile: str | None = None,
        session: boto3.Session | None = None,
        rate_limits: RateLimitsConfig | None = None,
    ):
        """Initialize ECS client.

        Args:
            region: AWS region
            profile: AWS profile name (optional)
            session: Existing boto3 session (optional, overrides profile)
            rate_limits: Limits for the ECS API bucket (defaults apply if omitted)
        """
        self.region = region
        self.profile = profile

        if session:
            self.session = session
        elif profile:
            self.session = boto3.Session(profile_name=profile, region_name=region)
        else:
            self.session = boto3.Session(region_name=region)

        self.ecs = self.session.client("ecs")
        initialize_rate_limiters(rate_limits or RateLimitsConfig())

        logger.debug("ecs_client_initialized", region=region, profile=profile)

    @staticmethod
    def _error_code(error: ClientError) -> str:
        return error.response.get("Error", {}).get("Code", "Unknown")

    @rate_limited(ECS_API)
    def describe_services(self, cluster: str | None, services: list[str]) -> list[dict[str, Any]]:
        """Describe services in a cluster.

        Args:
            cluster: Cluster name or ARN (default cluster if None)
            services: Service names

        Returns:
            List of service dictionaries

        Raises:
            ECSError: If the services cannot be described
        """
        params: dict[str, Any] = {"services": services}
        if cluster:
            params["cluster"] = cluster

        try:
            logger.debug("describing_services", cluster=cluster, services=services)
            response = self.ecs.describe_services(**params)
            return cast(list[dict[str, Any]], response.get("services", []))

        except ClientError as e:
            error_code = self._error_code(e)
            logger.error(
                "describe_services_failed", cluster=cluster, services=services, error_code=error_code
            )

            if error_code == "ClusterNotFoundException":
                raise ECSError(f"ECS cluster not found: {cluster}", error_code) from e
            raise ECSError(f"Failed to describe services {services}: {error_code}", error_code) from e

    @rate_limited(ECS_API)
    def list_task_definitions(self, family_prefix: str) -> list[str]:
        """List ACTIVE task definition ARNs in a family, newest first.

        Args:
            family_prefix: Task definition family

        Returns:
            List of task definition ARNs

        Raises:
            ECSError: If listing fails
        """
        try:
            logger.debug("listing_task_definitions", family=family_prefix)
            response = self.ecs.list_task_definitions(
                familyPrefix=family_prefix, sort="DESC", status="ACTIVE"
            )
            arns = response.get("taskDefinitionArns", [])

            logger.debug("task_definitions_listed", family=family_prefix, count=len(arns))
            return arns

        except ClientError as e:
            error_code = self._error_code(e)
            logger.error("list_task_definitions_failed", family=family_prefix, error_code=error_code)
            raise ECSError(
                f"Failed to list task definitions in family {family_prefix}: {error_code}",
                error_code,
            ) from e

    @rate_limited(ECS_API)
    def describe_task_definition(self, task_definition: str) -> dict[str, Any]:
        """Get a task definition.

        Args:
            task_definition: Task definition ARN or family:revision

        Returns:
            Task definition dictionary

        Raises:
            ECSError: If the task definition cannot be retrieved
        """
        try:
            logger.debug("describing_task_definition", task_definition=task_definition)
            response = self.ecs.describe_task_definition(taskDefinition=task_definition)
            return cast(dict[str, Any], response["taskDefinition"])

        except ClientError as e:
            error_code = self._error_code(e)
            logger.error(
                "describe_task_definition_failed",
                task_definition=task_definition,
                error_code=error_code,
            )
            raise ECSError(
                f"Failed to describe task definition {task_definition}: {error_code}", error_code
            ) from e

    @rate_limited(ECS_API)
    def register_task_definition(self, task_definition: dict[str, Any]) -> dict[str, Any]:
        """Register a new task definition revision.

        Args:
            task_definition: Registrable task definition fields

        Returns:
            Registered task definition dictionary

        Raises:
            ECSError: If registration fails
        """
        family = task_definition.get("family")
        try:
            logger.debug("registering_task_definition", family=family)
            response = self.ecs.register_task_definition(**task_definition)
            registered = cast(dict[str, Any], response["taskDefinition"])

            logger.info(
                "task_definition_registered",
                family=family,
                task_definition_arn=registered.get("taskDefinitionArn"),
            )
            return registered

        except ClientError as e:
            error_code = self._error_code(e)
            logger.error("register_task_definition_failed", family=family, error_code=error_code)
            raise ECSError(
                f"Failed to register task definition for family {family}: {error_code}",
                error_code,
            ) from e

    @rate_limited(ECS_API)
    def update_service(
        self, cluster: str | None, service: str, task_definition: str
    ) -> dict[str, Any]:
        """Point a service at a task definition.

        Args:
            cluster: Cluster name or ARN (default cluster if None)
            service: Service name
            task_definition: Task definition ARN

        Returns:
            Updated service dictionary

        Raises:
            ECSError: If the update is rejected
        """
        params: dict[str, Any] = {"service": service, "taskDefinition": task_definition}
        if cluster:
            params["cluster"] = cluster

        try:
            logger.debug("updating_service", cluster=cluster, service=service)
            response = self.ecs.update_service(**params)
            updated = cast(dict[str, Any], response["service"])

            logger.info(
                "service_updated", cluster=cluster, service=service, task_definition=task_definition
            )
            return updated

        except ClientError as e:
            error_code = self._error_code(e)
            logger.error("update_service_failed", cluster=cluster, service=service, error_code=error_code)

            if error_code in ("ServiceNotFoundException", "ServiceNotActiveException"):
                raise ECSError(f"ECS service not available: {service}", error_code) from e
            raise ECSError(f"Failed to update service {service}: {error_code}", error_code) from e
