"""Pipeline orchestrator for image rollouts."""

from ecs_updater.core.exceptions import ConfigurationError
from ecs_updater.core.models import PipelineRequest, PipelineResult
from ecs_updater.interfaces.pipeline import (
    Locator,
    ProgressCallback,
    Publisher,
    Repointer,
    Transformer,
    Waiter,
)
from ecs_updater.interfaces.service_provider import ServiceProvider
from ecs_updater.pipeline.locator import RevisionLocator
from ecs_updater.pipeline.publisher import RevisionPublisher
from ecs_updater.pipeline.repointer import ServiceRepointer
from ecs_updater.pipeline.transformer import ImageTransformer
from ecs_updater.pipeline.waiter import StabilityWaiter
from ecs_updater.utils.logging import get_logger

logger = get_logger(__name__)


class DeploymentPipeline:
    """Runs locate -> transform -> publish -> repoint -> wait.

    Every stage is injected. The first failing stage's exception propagates
    unchanged and no later stage runs.
    """

    def __init__(
        self,
        locator: Locator,
        transformer: Transformer,
        publisher: Publisher,
        repointer: Repointer,
        waiter: Waiter | None = None,
    ):
        """Initialize deployment pipeline.

        Args:
            locator: Finds the current task definition
            transformer: Rewrites container images
            publisher: Registers the new task definition
            repointer: Points the service at the new task definition
            waiter: Waits for the rollout (required only for requests with wait=True)
        """
        self.locator = locator
        self.transformer = transformer
        self.publisher = publisher
        self.repointer = repointer
        self.waiter = waiter

    @classmethod
    def from_provider(
        cls, provider: ServiceProvider, request: PipelineRequest
    ) -> "DeploymentPipeline":
        """Wire the default stages around one provider.

        Args:
            provider: Remote service provider shared by all stages
            request: Request supplying the waiter's polling settings

        Returns:
            DeploymentPipeline instance
        """
        return cls(
            locator=RevisionLocator(provider),
            transformer=ImageTransformer(),
            publisher=RevisionPublisher(provider),
            repointer=ServiceRepointer(provider),
            waiter=StabilityWaiter(
                provider,
                poll_interval_seconds=request.poll_interval_seconds,
                initial_delay_seconds=request.initial_delay_seconds,
                timeout_seconds=request.timeout_seconds,
                verbose=request.verbose,
            ),
        )

    async def run(
        self, request: PipelineRequest, on_progress: ProgressCallback | None = None
    ) -> PipelineResult:
        """Roll the requested image out.

        Args:
            request: Pipeline request
            on_progress: Receives waiter progress bars in verbose mode

        Returns:
            PipelineResult with the new task definition ARN

        Raises:
            UpdaterError: From the first stage that fails
        """
        logger.info(
            "pipeline_started",
            target=request.target.kind,
            containers=list(request.container_names),
            image=request.image,
        )

        if request.wait and request.service_target and self.waiter is None:
            raise ConfigurationError("Waiting for a rollout requires a waiter stage")

        current = await self.locator.locate_current(request)
        mutated = self.transformer.apply_image(current, request.container_names, request.image)
        registered = await self.publisher.publish(mutated)
        revision_arn = registered["taskDefinitionArn"]

        result = PipelineResult(
            revision_arn=revision_arn,
            previous_revision_arn=current.get("taskDefinitionArn"),
        )

        target = request.service_target
        if target is None:
            logger.info("pipeline_completed", task_definition_arn=revision_arn)
            return result

        result.service = await self.repointer.repoint(
            target.cluster, target.service_name, revision_arn
        )

        if request.wait and self.waiter is not None:
            result.wait_state = await self.waiter.wait(
                target.cluster, target.service_name, revision_arn, on_progress
            )

        logger.info(
            "pipeline_completed",
            task_definition_arn=revision_arn,
            wait_state=result.wait_state.value if result.wait_state else None,
        )
        return result
