"""Core data models for the ECS image updater."""

from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ecs_updater.core.exceptions import ConfigurationError
from ecs_updater.interfaces.ecs_types import ServiceDescriptor


class ServiceTarget(BaseModel):
    """Address the current task definition through the service running it."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["service"] = "service"
    service_name: str = Field(..., min_length=1, description="ECS service name")
    cluster: str | None = Field(None, description="Cluster name or ARN (default cluster if None)")


class FamilyTarget(BaseModel):
    """Address the newest ACTIVE task definition in a family."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["family"] = "family"
    family: str = Field(..., min_length=1, description="Task definition family")
    cluster: str | None = None


RevisionTarget = Annotated[ServiceTarget | FamilyTarget, Field(discriminator="kind")]


class WaitState(str, Enum):
    """Stability waiter state."""

    POLLING = "polling"
    CONVERGED = "converged"
    SUPERSEDED = "superseded"
    FAILED = "failed"


class PipelineRequest(BaseModel):
    """Input for one image rollout.

    Constructed once per invocation and immutable thereafter.
    """

    model_config = ConfigDict(frozen=True)

    target: RevisionTarget
    container_names: tuple[str, ...] = Field(..., min_length=1)
    image: str = Field(..., min_length=1)
    wait: bool = False
    poll_interval_seconds: int = Field(default=5, ge=1)
    initial_delay_seconds: float = Field(default=2.0, ge=0)
    timeout_seconds: float | None = Field(default=None, ge=0)
    verbose: bool = False

    @field_validator("container_names", mode="before")
    @classmethod
    def normalize_container_names(cls, value: Any) -> Any:
        """Accept a single name and drop duplicates while keeping order."""
        if isinstance(value, str):
            value = [value]
        if isinstance(value, (list, tuple)):
            return tuple(dict.fromkeys(value))
        return value

    @field_validator("container_names")
    @classmethod
    def reject_blank_names(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if any(not name for name in value):
            raise ValueError("Container names must not be empty")
        return value

    @classmethod
    def from_options(
        cls,
        *,
        container_names: str | list[str] | tuple[str, ...],
        image: str,
        service_name: str | None = None,
        family: str | None = None,
        cluster: str | None = None,
        **kwargs: Any,
    ) -> "PipelineRequest":
        """Build a request from loose CLI-style options.

        Args:
            container_names: One or more container names to update
            image: New image reference
            service_name: Service addressing mode
            family: Task definition family addressing mode
            cluster: Cluster name or ARN
            **kwargs: Remaining request fields (wait, poll_interval_seconds, ...)

        Returns:
            PipelineRequest instance

        Raises:
            ConfigurationError: If neither or both addressing modes are given,
                or any field is invalid
        """
        if not service_name and not family:
            raise ConfigurationError(
                "Ensure either the service name or task definition family is specified"
            )
        if service_name and family:
            raise ConfigurationError(
                "Specify either the service name or task definition family, not both"
            )

        target: ServiceTarget | FamilyTarget
        if service_name:
            target = ServiceTarget(service_name=service_name, cluster=cluster)
        else:
            target = FamilyTarget(family=family, cluster=cluster)  # type: ignore[arg-type]

        try:
            return cls(target=target, container_names=container_names, image=image, **kwargs)
        except ValueError as e:
            raise ConfigurationError(f"Invalid request: {e}") from e

    @property
    def service_target(self) -> ServiceTarget | None:
        """Service target when the request addresses a service, None otherwise."""
        return self.target if isinstance(self.target, ServiceTarget) else None


class PipelineResult(BaseModel):
    """Outcome of a completed pipeline run."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    revision_arn: str
    previous_revision_arn: str | None = None
    service: ServiceDescriptor | None = None
    wait_state: WaitState | None = None

    @property
    def converged(self) -> bool:
        return self.wait_state is WaitState.CONVERGED
