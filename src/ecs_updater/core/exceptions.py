"""Custom exceptions for the ECS image updater."""


class UpdaterError(Exception):
    """Base exception for all updater errors."""


class ConfigurationError(UpdaterError):
    """Invalid request shape or configuration."""


class NotFoundError(UpdaterError):
    """A named service, family member or container does not exist."""


class ContainerNotFoundError(NotFoundError):
    """A requested container is absent from the task definition.

    Attributes:
        container_name: Name of the container that could not be found
    """

    def __init__(self, container_name: str):
        """Initialize container not found error.

        Args:
            container_name: Name of the missing container
        """
        super().__init__(
            f'Could not find container name "{container_name}" in existing task definition'
        )
        self.container_name = container_name


class RemoteError(UpdaterError):
    """A call to the remote orchestration service failed."""


class ECSError(RemoteError):
    """AWS ECS operation failed.

    Attributes:
        error_code: AWS error code, when the failure came from the ECS API
    """

    def __init__(self, message: str, error_code: str | None = None):
        super().__init__(message)
        self.error_code = error_code


class WaitTimeoutError(UpdaterError):
    """Service did not stabilise before the configured wait ceiling."""
