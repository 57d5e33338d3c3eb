"""Pytest configuration and shared fixtures."""

import copy
from typing import Any
from unittest.mock import patch

import pytest

from ecs_updater.interfaces.ecs_types import Deployment, ServiceDescriptor
from ecs_updater.interfaces.service_provider import ServiceProvider


@pytest.fixture(autouse=True)
def mock_rate_limiters(request):
    """Mock rate limiter for all tests to avoid registration issues."""
    if "no_rate_limiter_mock" in request.keywords:
        yield
        return

    with patch("ecs_updater.utils.rate_limiter.RateLimiter.acquire", return_value=True):
        yield


class InMemoryECS(ServiceProvider):
    """In-memory ServiceProvider recording every call."""

    def __init__(self) -> None:
        self.task_definitions: dict[str, dict[str, Any]] = {}
        self.services: dict[str, ServiceDescriptor] = {}
        self.calls: list[tuple[str, tuple]] = []

    def add_task_definition(self, document: dict[str, Any]) -> str:
        arn = document["taskDefinitionArn"]
        self.task_definitions[arn] = copy.deepcopy(document)
        return arn

    def add_service(self, name: str, revision_arn: str, running: int = 1) -> None:
        self.services[name] = ServiceDescriptor(
            service_name=name,
            current_revision_arn=revision_arn,
            deployments=[Deployment(revision_arn=revision_arn, running_count=running)],
        )

    async def describe_service(self, cluster, service_name):
        self.calls.append(("describe_service", (cluster, service_name)))
        return self.services.get(service_name)

    async def list_revisions(self, family):
        self.calls.append(("list_revisions", (family,)))
        arns = [
            arn
            for arn, doc in self.task_definitions.items()
            if doc["family"] == family and doc.get("status", "ACTIVE") == "ACTIVE"
        ]
        return sorted(arns, key=lambda a: self.task_definitions[a]["revision"], reverse=True)

    async def describe_revision(self, revision_arn):
        self.calls.append(("describe_revision", (revision_arn,)))
        return copy.deepcopy(self.task_definitions[revision_arn])

    async def register_revision(self, document):
        self.calls.append(("register_revision", (document,)))
        family = document["family"]
        revision = 1 + max(
            (d["revision"] for d in self.task_definitions.values() if d["family"] == family),
            default=0,
        )
        arn = f"arn:aws:ecs:us-east-1:123456789012:task-definition/{family}:{revision}"
        stored = {
            **copy.deepcopy(document),
            "taskDefinitionArn": arn,
            "revision": revision,
            "status": "ACTIVE",
        }
        self.task_definitions[arn] = stored
        return copy.deepcopy(stored)

    async def update_service(self, cluster, service_name, revision_arn):
        self.calls.append(("update_service", (cluster, service_name, revision_arn)))
        service = self.services[service_name]
        service.current_revision_arn = revision_arn
        service.deployments.insert(0, Deployment(revision_arn=revision_arn, pending_count=1))
        return copy.deepcopy(service)

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]


@pytest.fixture
def sample_task_definition() -> dict[str, Any]:
    """Task definition as returned by describe_task_definition."""
    return {
        "taskDefinitionArn": "arn:aws:ecs:us-east-1:123456789012:task-definition/planet-express:96",
        "family": "planet-express",
        "revision": 96,
        "status": "ACTIVE",
        "executionRoleArn": "arn:aws:iam::123456789012:role/ecsTaskExecutionRole",
        "taskRoleArn": "arn:aws:iam::123456789012:role/planet-express",
        "networkMode": "awsvpc",
        "requiresCompatibilities": ["FARGATE"],
        "compatibilities": ["EC2", "FARGATE"],
        "requiresAttributes": [{"name": "com.amazonaws.ecs.capability.docker-remote-api.1.18"}],
        "placementConstraints": [],
        "volumes": [{"name": "scratch"}],
        "cpu": "256",
        "memory": "512",
        "registeredAt": "2024-01-01T00:00:00Z",
        "containerDefinitions": [
            {
                "name": "app",
                "image": "planet-express/app:1",
                "essential": True,
                "portMappings": [{"containerPort": 8080}],
                "environment": [{"name": "CREW", "value": "fry"}],
            },
            {"name": "worker", "image": "planet-express/worker:1", "essential": False},
            {"name": "db", "image": "postgres:15", "essential": True},
        ],
    }


@pytest.fixture
def in_memory_ecs() -> InMemoryECS:
    """Provide an empty in-memory ECS provider."""
    return InMemoryECS()


# ==============================================================================
# Pytest Markers
# ==============================================================================


def pytest_configure(config: Any) -> None:
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "no_rate_limiter_mock: Disable rate limiter mocking")
