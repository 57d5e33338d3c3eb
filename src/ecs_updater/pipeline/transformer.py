"""Task definition image rewriting."""

import copy
from typing import Any

from ecs_updater.core.exceptions import ContainerNotFoundError
from ecs_updater.interfaces.pipeline import Transformer

# Fields carried into the registration request; everything else that
# describe_task_definition returns (arn, revision, status, ...) is dropped.
REGISTRABLE_FIELDS = (
    "containerDefinitions",
    "executionRoleArn",
    "family",
    "networkMode",
    "placementConstraints",
    "taskRoleArn",
    "volumes",
    "requiresCompatibilities",
    "cpu",
    "memory",
)


def apply_image(
    document: dict[str, Any],
    container_names: str | list[str] | tuple[str, ...],
    image: str,
) -> dict[str, Any]:
    """Return a registrable copy of a task definition with a new image.

    The input document is never modified. Either every named container is
    updated or ContainerNotFoundError is raised.

    Args:
        document: Task definition as returned by describe_task_definition
        container_names: Container name, or names, to update
        image: New image reference

    Returns:
        Task definition restricted to REGISTRABLE_FIELDS

    Raises:
        ContainerNotFoundError: If a named container is not in the document
    """
    if isinstance(container_names, str):
        container_names = [container_names]

    containers = document.get("containerDefinitions", [])
    indexes: dict[str, int] = {}
    for name in container_names:
        index = next((i for i, c in enumerate(containers) if c.get("name") == name), None)
        if index is None:
            raise ContainerNotFoundError(name)
        indexes[name] = index

    clone = copy.deepcopy(document)
    for index in indexes.values():
        clone["containerDefinitions"][index]["image"] = image

    return {key: clone[key] for key in REGISTRABLE_FIELDS if key in clone}


def container_images(document: dict[str, Any]) -> dict[str, str]:
    """Map container name to image for a task definition."""
    return {c["name"]: c.get("image", "") for c in document.get("containerDefinitions", [])}


class ImageTransformer(Transformer):
    """Transformer stage backed by apply_image."""

    def apply_image(
        self,
        document: dict[str, Any],
        container_names: str | list[str] | tuple[str, ...],
        image: str,
    ) -> dict[str, Any]:
        return apply_image(document, container_names, image)
