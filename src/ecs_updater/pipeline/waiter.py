"""Polling a service until a rollout reaches a terminal state."""

import asyncio
from collections.abc import Awaitable, Callable

from tenacity import (
    AsyncRetrying,
    RetryError,
    retry_if_result,
    stop_after_delay,
    stop_never,
    wait_fixed,
)

from ecs_updater.core.exceptions import NotFoundError, WaitTimeoutError
from ecs_updater.core.models import WaitState
from ecs_updater.interfaces.ecs_types import Deployment
from ecs_updater.interfaces.pipeline import ProgressCallback, Waiter
from ecs_updater.interfaces.service_provider import ServiceProvider
from ecs_updater.utils.logging import get_logger

logger = get_logger(__name__)


def evaluate_deployments(deployments: list[Deployment], revision_arn: str) -> WaitState:
    """Classify a service's deployments relative to the target revision.

    Args:
        deployments: Deployments reported by the service
        revision_arn: Task definition being rolled out

    Returns:
        SUPERSEDED if no deployment references the target, CONVERGED if the
        target is the only deployment, POLLING otherwise
    """
    if not any(d.revision_arn == revision_arn for d in deployments):
        return WaitState.SUPERSEDED
    if len(deployments) == 1:
        return WaitState.CONVERGED
    return WaitState.POLLING


def render_progress(deployments: list[Deployment], revision_arn: str) -> str:
    """Render a one-line progress bar for a rollout.

    ``X`` is a running and ``x`` a pending task of the target revision; ``.``
    is a running task of any other deployment.
    """
    bar = ""
    for deployment in deployments:
        if deployment.revision_arn == revision_arn:
            bar += "X" * deployment.running_count + "x" * deployment.pending_count
        else:
            bar += "." * deployment.running_count
    return f"[{bar}]"


class StabilityWaiter(Waiter):
    """Waits for a service to run only the target task definition.

    Polls are sequential and never overlap. Without ``timeout_seconds`` the
    waiter polls until a terminal state is reached.
    """

    def __init__(
        self,
        provider: ServiceProvider,
        poll_interval_seconds: int = 5,
        initial_delay_seconds: float = 2.0,
        timeout_seconds: float | None = None,
        verbose: bool = False,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """Initialize stability waiter.

        Args:
            provider: Remote service provider
            poll_interval_seconds: Delay between polls
            initial_delay_seconds: Delay before the first poll, giving ECS time
                to register the rollout
            timeout_seconds: Optional ceiling on total polling time
            verbose: Report a progress bar on every non-terminal poll
            sleep: Coroutine used to suspend between polls
        """
        self.provider = provider
        self.poll_interval_seconds = poll_interval_seconds
        self.initial_delay_seconds = initial_delay_seconds
        self.timeout_seconds = timeout_seconds
        self.verbose = verbose
        self._sleep = sleep

    async def poll(
        self,
        cluster: str | None,
        service_name: str,
        revision_arn: str,
        on_progress: ProgressCallback | None = None,
    ) -> WaitState:
        """Fetch deployments once and classify them.

        Raises:
            NotFoundError: If the service has disappeared
            RemoteError: If the describe call fails
        """
        service = await self.provider.describe_service(cluster, service_name)
        if service is None:
            raise NotFoundError(f'Could not find service "{service_name}"')

        state = evaluate_deployments(service.deployments, revision_arn)

        if state is WaitState.POLLING and self.verbose:
            progress = render_progress(service.deployments, revision_arn)
            logger.info("rollout_progress", service=service_name, progress=progress)
            if on_progress:
                on_progress(progress)

        return state

    async def wait(
        self,
        cluster: str | None,
        service_name: str,
        revision_arn: str,
        on_progress: ProgressCallback | None = None,
    ) -> WaitState:
        logger.info(
            "waiting_for_rollout",
            service=service_name,
            task_definition_arn=revision_arn,
            interval=self.poll_interval_seconds,
            timeout=self.timeout_seconds,
        )

        await self._sleep(self.initial_delay_seconds)

        retrying = AsyncRetrying(
            retry=retry_if_result(lambda state: state is WaitState.POLLING),
            wait=wait_fixed(self.poll_interval_seconds),
            stop=(
                stop_after_delay(self.timeout_seconds)
                if self.timeout_seconds is not None
                else stop_never
            ),
            sleep=self._sleep,
            reraise=True,
        )

        try:
            state = await retrying(self.poll, cluster, service_name, revision_arn, on_progress)
        except RetryError as e:
            logger.error(
                "rollout_wait_timed_out", service=service_name, timeout=self.timeout_seconds
            )
            raise WaitTimeoutError(
                f'Service "{service_name}" did not stabilise within {self.timeout_seconds} seconds'
            ) from e
        except Exception as e:
            logger.error(
                "rollout_wait_failed",
                service=service_name,
                state=WaitState.FAILED.value,
                error=str(e),
            )
            raise

        if state is WaitState.SUPERSEDED:
            logger.warning(
                "revision_superseded", service=service_name, task_definition_arn=revision_arn
            )
        else:
            logger.info("rollout_converged", service=service_name, task_definition_arn=revision_arn)
        return state
