"""Service provider interface for the remote orchestration service."""

from abc import ABC, abstractmethod
from typing import Any

from ecs_updater.interfaces.ecs_types import ServiceDescriptor


class ServiceProvider(ABC):
    """Abstract interface for the cluster manager operations the pipeline needs.

    Implementation Note:
    Concrete implementations should hide provider-specific details
    (boto3 exceptions, response envelopes, etc.) and raise RemoteError
    subclasses on failure. ``register_revision`` creates a new resource on
    every call and must not be retried blindly.
    """

    @abstractmethod
    async def describe_service(
        self, cluster: str | None, service_name: str
    ) -> ServiceDescriptor | None:
        """Describe a single service.

        Args:
            cluster: Cluster name or ARN (provider default if None)
            service_name: Name of the service

        Returns:
            ServiceDescriptor, or None if the cluster has no such service

        Raises:
            RemoteError: If the call fails
        """

    @abstractmethod
    async def list_revisions(self, family: str) -> list[str]:
        """List ACTIVE task definition ARNs in a family, newest first.

        Args:
            family: Task definition family

        Returns:
            List of task definition ARNs

        Raises:
            RemoteError: If the call fails
        """

    @abstractmethod
    async def describe_revision(self, revision_arn: str) -> dict[str, Any]:
        """Fetch a full task definition document.

        Args:
            revision_arn: Task definition ARN (or family:revision)

        Returns:
            Task definition document

        Raises:
            RemoteError: If the call fails
        """

    @abstractmethod
    async def register_revision(self, document: dict[str, Any]) -> dict[str, Any]:
        """Register a task definition document as a new revision.

        Args:
            document: Registrable task definition fields

        Returns:
            Stored task definition including its new ARN

        Raises:
            RemoteError: If the call fails
        """

    @abstractmethod
    async def update_service(
        self, cluster: str | None, service_name: str, revision_arn: str
    ) -> ServiceDescriptor:
        """Point a service at a task definition.

        Args:
            cluster: Cluster name or ARN (provider default if None)
            service_name: Name of the service
            revision_arn: Task definition ARN to deploy

        Returns:
            Updated ServiceDescriptor

        Raises:
            RemoteError: If the call fails
        """
