"""Data types for the ServiceProvider interface."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Deployment:
    """One task definition contributing tasks to a service rollout."""

    revision_arn: str
    running_count: int = 0
    pending_count: int = 0
    status: str | None = None
    rollout_state: str | None = None

    def __post_init__(self) -> None:
        if self.running_count < 0 or self.pending_count < 0:
            raise ValueError("Deployment task counts must be non-negative")

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Deployment":
        """Build from an ECS ``deployments`` entry."""
        return cls(
            revision_arn=data["taskDefinition"],
            running_count=data.get("runningCount", 0),
            pending_count=data.get("pendingCount", 0),
            status=data.get("status"),
            rollout_state=data.get("rolloutState"),
        )


@dataclass
class ServiceDescriptor:
    """Running service and its active deployments."""

    service_name: str
    current_revision_arn: str | None  # None for services without a service-level task definition
    deployments: list[Deployment] = field(default_factory=list)
    cluster_arn: str | None = None
    status: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "ServiceDescriptor":
        """Build from an ECS ``services`` entry."""
        return cls(
            service_name=data["serviceName"],
            current_revision_arn=data.get("taskDefinition"),
            deployments=[Deployment.from_api(d) for d in data.get("deployments", [])],
            cluster_arn=data.get("clusterArn"),
            status=data.get("status"),
        )
