"""Image rollout pipeline stages."""

from ecs_updater.pipeline.locator import RevisionLocator
from ecs_updater.pipeline.orchestrator import DeploymentPipeline
from ecs_updater.pipeline.publisher import RevisionPublisher
from ecs_updater.pipeline.repointer import ServiceRepointer
from ecs_updater.pipeline.transformer import ImageTransformer, apply_image
from ecs_updater.pipeline.waiter import StabilityWaiter, evaluate_deployments, render_progress

__all__ = [
    "DeploymentPipeline",
    "ImageTransformer",
    "RevisionLocator",
    "RevisionPublisher",
    "ServiceRepointer",
    "StabilityWaiter",
    "apply_image",
    "evaluate_deployments",
    "render_progress",
]
