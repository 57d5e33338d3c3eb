"""Main CLI entry point for the ECS image updater."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.markup import escape

from ecs_updater import __version__
from ecs_updater.core.exceptions import UpdaterError

if TYPE_CHECKING:
    from ecs_updater.adapters.ecs_adapter import ECSAdapter
    from ecs_updater.core.config import UpdaterConfig

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)


class UpdaterContext:
    """Shared context for CLI commands with lazy initialization."""

    def __init__(
        self,
        config_path: str | None,
        region: str | None = None,
        profile: str | None = None,
    ):
        """Initialize context.

        Args:
            config_path: Path to configuration file (optional)
            region: AWS region overriding the configuration
            profile: AWS profile overriding the configuration
        """
        self.config_path = config_path
        self.region = region
        self.profile = profile
        self._config: UpdaterConfig | None = None
        self._ecs_adapter: ECSAdapter | None = None

    @property
    def config(self) -> UpdaterConfig:
        """Get or load config lazily."""
        if self._config is None:
            from ecs_updater.core.config import UpdaterConfig

            config = UpdaterConfig.load(self.config_path)
            if self.region:
                config.aws.region = self.region
            if self.profile:
                config.aws.profile = self.profile
            self._config = config
        return self._config

    @property
    def ecs_adapter(self) -> ECSAdapter:
        """Get or create ECS adapter lazily."""
        if self._ecs_adapter is None:
            from ecs_updater.adapters.ecs_adapter import ECSAdapter

            self._ecs_adapter = ECSAdapter(
                region=self.config.aws.region,
                profile=self.config.aws.profile,
                rate_limits=self.config.rate_limits,
            )
        return self._ecs_adapter

    def setup_logging(self, level: str | None = None) -> None:
        from ecs_updater.utils.logging import setup_logging

        logging_config = self.config.logging
        setup_logging(
            level=level or logging_config.level,
            format=logging_config.format,
            output=logging_config.output,
        )


def _fail(error: Exception) -> None:
    from ecs_updater.utils.logging import get_logger, log_error

    log_error(get_logger(__name__), error)
    err_console.print(f"[red]Error: {escape(str(error))}[/red]")
    sys.exit(1)


def _print_progress(line: str) -> None:
    # Progress bars look like "[Xx..]", which rich would parse as markup.
    console.print(line, markup=False)


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Path to configuration file (default: ~/.ecs-updater/config.yaml if present)",
)
@click.option(
    "--region",
    envvar="AWS_DEFAULT_REGION",
    default=None,
    help="AWS region (defaults to config, then us-east-1)",
)
@click.option("--profile", envvar="AWS_PROFILE", default=None, help="AWS profile name")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Log level override",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: str | None,
    region: str | None,
    profile: str | None,
    log_level: str | None,
) -> None:
    """Roll a new container image onto an ECS service."""
    ctx.obj = UpdaterContext(config_path=config, region=region, profile=profile)
    try:
        ctx.obj.setup_logging(log_level)
    except UpdaterError as e:
        _fail(e)


@cli.command()
@click.option("--cluster", help="Cluster name or ARN")
@click.option("--service", "service_name", help="Service whose task definition is updated")
@click.option("--family", help="Task definition family to update (instead of --service)")
@click.option(
    "--container",
    "-c",
    "containers",
    multiple=True,
    required=True,
    help="Container name to update (repeatable)",
)
@click.option("--image", "-i", required=True, help="New image reference")
@click.option("--wait", is_flag=True, help="Wait for the service rollout to finish")
@click.option("--interval", type=click.IntRange(min=1), default=None, help="Poll interval in seconds")
@click.option(
    "--timeout",
    type=click.FloatRange(min=0),
    default=None,
    help="Give up waiting after this many seconds (default: wait indefinitely)",
)
@click.option("--verbose", "-v", is_flag=True, help="Show rollout progress while waiting")
@click.pass_context
def update(
    ctx: click.Context,
    cluster: str | None,
    service_name: str | None,
    family: str | None,
    containers: tuple[str, ...],
    image: str,
    wait: bool,
    interval: int | None,
    timeout: float | None,
    verbose: bool,
) -> None:
    """Register a task definition with a new image and deploy it."""
    import asyncio

    from ecs_updater.core.models import PipelineRequest, WaitState
    from ecs_updater.pipeline.orchestrator import DeploymentPipeline
    from ecs_updater.utils.logging import bind_rollout_context

    updater_ctx: UpdaterContext = ctx.obj

    if wait and family and not service_name:
        raise click.UsageError("--wait needs --service; a --family update deploys nothing")

    try:
        waiter_config = updater_ctx.config.waiter
        request = PipelineRequest.from_options(
            cluster=cluster,
            service_name=service_name,
            family=family,
            container_names=containers,
            image=image,
            wait=wait,
            poll_interval_seconds=interval or waiter_config.poll_interval_seconds,
            initial_delay_seconds=waiter_config.initial_delay_seconds,
            timeout_seconds=timeout if timeout is not None else waiter_config.timeout_seconds,
            verbose=verbose,
        )
        bind_rollout_context(service=service_name, family=family, image=image)

        pipeline = DeploymentPipeline.from_provider(updater_ctx.ecs_adapter, request)
        result = asyncio.run(pipeline.run(request, on_progress=_print_progress))
    except UpdaterError as e:
        _fail(e)
        return

    console.print(f"Created Task Definition: {result.revision_arn}")

    if result.service is not None:
        console.print(
            f"Service {result.service.service_name} has been updated to use "
            f"Task Definition: {result.revision_arn}"
        )

    if result.wait_state is WaitState.CONVERGED:
        console.print(
            f"[green]Task definition {result.revision_arn} for service "
            f"{service_name} is deployed[/green]"
        )
    elif result.wait_state is WaitState.SUPERSEDED:
        console.print(
            f"[yellow]Task definition {result.revision_arn} for service "
            f"{service_name} is no longer deploying[/yellow]"
        )


@cli.command()
@click.option("--cluster", help="Cluster name or ARN")
@click.option("--service", "service_name", help="Service to inspect")
@click.option("--family", help="Task definition family to inspect (instead of --service)")
@click.pass_context
def current(
    ctx: click.Context, cluster: str | None, service_name: str | None, family: str | None
) -> None:
    """Show the task definition currently in use and its container images."""
    import asyncio

    from rich.table import Table

    from ecs_updater.core.models import FamilyTarget, ServiceTarget
    from ecs_updater.pipeline.locator import RevisionLocator
    from ecs_updater.pipeline.transformer import container_images

    updater_ctx: UpdaterContext = ctx.obj

    if bool(service_name) == bool(family):
        raise click.UsageError("Specify exactly one of --service or --family")

    target: ServiceTarget | FamilyTarget
    if service_name:
        target = ServiceTarget(service_name=service_name, cluster=cluster)
    else:
        target = FamilyTarget(family=family, cluster=cluster)  # type: ignore[arg-type]

    try:
        locator = RevisionLocator(updater_ctx.ecs_adapter)
        document = asyncio.run(locator.locate(target))
    except UpdaterError as e:
        _fail(e)
        return

    console.print(f"Task Definition: {document.get('taskDefinitionArn')}")

    table = Table(show_header=True)
    table.add_column("Container")
    table.add_column("Image")
    for name, image in container_images(document).items():
        table.add_row(name, image)
    console.print(table)


if __name__ == "__main__":
    cli()
