"""Unit tests for ECSAdapter.

Tests the ECS adapter implementation of ServiceProvider interface.
All AWS SDK calls are mocked to ensure tests are isolated and fast.
"""

from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import EndpointConnectionError

from ecs_updater.adapters.ecs_adapter import ECSAdapter
from ecs_updater.clients.ecs_client import ECSClient
from ecs_updater.core.config import RateLimitsConfig
from ecs_updater.core.exceptions import ECSError
from ecs_updater.interfaces.ecs_types import ServiceDescriptor
from ecs_updater.utils.rate_limiter import ECS_API, RateLimiter, get_rate_limiter, rate_limited


@pytest.fixture
def mock_client() -> MagicMock:
    """Mock ECSClient."""
    client = MagicMock()
    client.region = "us-east-1"
    return client


class TestECSAdapterInit:
    """Tests for ECSAdapter initialization."""

    @patch("ecs_updater.adapters.ecs_adapter.ECSClient")
    def test_init_with_defaults(self, mock_ecs_client_class: MagicMock) -> None:
        """Test initializing adapter with default parameters."""
        adapter = ECSAdapter()

        mock_ecs_client_class.assert_called_once_with(
            region="us-east-1", profile=None, rate_limits=None
        )
        assert adapter.client == mock_ecs_client_class.return_value

    @patch("ecs_updater.adapters.ecs_adapter.ECSClient")
    def test_init_with_region_and_profile(self, mock_ecs_client_class: MagicMock) -> None:
        """Test region and profile are threaded into the client."""
        ECSAdapter(region="eu-west-1", profile="deploy")

        mock_ecs_client_class.assert_called_once_with(
            region="eu-west-1", profile="deploy", rate_limits=None
        )


class TestDescribeService:
    """Tests for describe_service."""

    @pytest.mark.asyncio
    async def test_describe_service_matches_by_name(self, mock_client: MagicMock) -> None:
        """Test the matching service is parsed into a ServiceDescriptor."""
        mock_client.describe_services.return_value = [
            {"serviceName": "1", "taskDefinition": "arn"},
            {
                "serviceName": "planet-express",
                "taskDefinition": "arn::good-news:96",
                "deployments": [{"taskDefinition": "arn::good-news:96", "runningCount": 2}],
            },
        ]
        adapter = ECSAdapter(client=mock_client)

        service = await adapter.describe_service("arn:cluster", "planet-express")

        assert isinstance(service, ServiceDescriptor)
        assert service.current_revision_arn == "arn::good-news:96"
        assert service.deployments[0].running_count == 2
        mock_client.describe_services.assert_called_once_with("arn:cluster", ["planet-express"])

    @pytest.mark.asyncio
    async def test_describe_service_missing_returns_none(self, mock_client: MagicMock) -> None:
        """Test an absent service yields None."""
        mock_client.describe_services.return_value = []
        adapter = ECSAdapter(client=mock_client)

        assert await adapter.describe_service(None, "planet-express") is None

    @pytest.mark.asyncio
    async def test_ecs_error_passes_through(self, mock_client: MagicMock) -> None:
        """Test ECSError from the client is re-raised as-is."""
        error = ECSError("Failed", "AccessDeniedException")
        mock_client.describe_services.side_effect = error
        adapter = ECSAdapter(client=mock_client)

        with pytest.raises(ECSError) as exc_info:
            await adapter.describe_service(None, "planet-express")

        assert exc_info.value is error

    @pytest.mark.asyncio
    async def test_connection_error_becomes_ecs_error(self, mock_client: MagicMock) -> None:
        """Test botocore transport failures surface as ECSError."""
        mock_client.describe_services.side_effect = EndpointConnectionError(
            endpoint_url="https://ecs.us-east-1.amazonaws.com"
        )
        adapter = ECSAdapter(client=mock_client)

        with pytest.raises(ECSError, match="describe_services"):
            await adapter.describe_service(None, "planet-express")


class TestRevisionOperations:
    """Tests for task definition operations."""

    @pytest.mark.asyncio
    async def test_list_revisions(self, mock_client: MagicMock) -> None:
        """Test list_revisions delegates to the client."""
        mock_client.list_task_definitions.return_value = ["arn:2", "arn:1"]
        adapter = ECSAdapter(client=mock_client)

        assert await adapter.list_revisions("simpsons") == ["arn:2", "arn:1"]
        mock_client.list_task_definitions.assert_called_once_with("simpsons")

    @pytest.mark.asyncio
    async def test_describe_revision(self, mock_client: MagicMock) -> None:
        """Test describe_revision returns the raw document."""
        mock_client.describe_task_definition.return_value = {"taskDefinitionArn": "arn:1"}
        adapter = ECSAdapter(client=mock_client)

        assert await adapter.describe_revision("arn:1") == {"taskDefinitionArn": "arn:1"}

    @pytest.mark.asyncio
    async def test_register_revision(self, mock_client: MagicMock) -> None:
        """Test register_revision sends the document unchanged."""
        document = {"family": "planet-express", "containerDefinitions": []}
        mock_client.register_task_definition.return_value = {
            **document,
            "taskDefinitionArn": "arn:created",
        }
        adapter = ECSAdapter(client=mock_client)

        result = await adapter.register_revision(document)

        assert result["taskDefinitionArn"] == "arn:created"
        mock_client.register_task_definition.assert_called_once_with(document)

    @pytest.mark.asyncio
    async def test_update_service(self, mock_client: MagicMock) -> None:
        """Test update_service parses the updated service."""
        mock_client.update_service.return_value = {
            "serviceName": "serviceName",
            "taskDefinition": "arn:taskDefinition",
            "deployments": [
                {"taskDefinition": "arn:taskDefinition", "pendingCount": 1},
                {"taskDefinition": "arn:old", "runningCount": 1},
            ],
        }
        adapter = ECSAdapter(client=mock_client)

        service = await adapter.update_service("arn:cluster", "serviceName", "arn:taskDefinition")

        assert service.current_revision_arn == "arn:taskDefinition"
        assert len(service.deployments) == 2
        mock_client.update_service.assert_called_once_with(
            "arn:cluster", "serviceName", "arn:taskDefinition"
        )


class _LimitedClient:
    """Client whose only call goes through the ECS API bucket."""

    region = "us-east-1"

    @rate_limited(ECS_API)
    def describe_task_definition(self, task_definition: str) -> dict:
        return {"taskDefinitionArn": task_definition}


@pytest.fixture
def fresh_rate_limiter():
    """Swap in an empty process-wide rate limiter."""
    with patch("ecs_updater.utils.rate_limiter._rate_limiter", RateLimiter()):
        yield get_rate_limiter()


@pytest.mark.no_rate_limiter_mock
class TestRateLimiterIntegration:
    """Tests for rate limiting around adapter calls."""

    @pytest.mark.asyncio
    async def test_unregistered_bucket_becomes_ecs_error(self, fresh_rate_limiter) -> None:
        """Test a call made before the bucket exists surfaces as ECSError."""
        adapter = ECSAdapter(client=_LimitedClient())  # type: ignore[arg-type]

        with pytest.raises(ECSError, match="describe_task_definition"):
            await adapter.describe_revision("app:1")

    @pytest.mark.asyncio
    async def test_throttle_timeout_becomes_ecs_error(self, fresh_rate_limiter) -> None:
        """Test running out of tokens surfaces as ECSError."""
        fresh_rate_limiter.register(ECS_API, capacity=1, refill_rate=0.001, max_wait=0.1)
        adapter = ECSAdapter(client=_LimitedClient())  # type: ignore[arg-type]

        assert await adapter.describe_revision("app:1") == {"taskDefinitionArn": "app:1"}
        with pytest.raises(ECSError, match="Rate limit"):
            await adapter.describe_revision("app:2")

    @pytest.mark.asyncio
    async def test_default_client_registers_bucket(self, fresh_rate_limiter) -> None:
        """Test an adapter built without the CLI can call ECS straight away."""
        with patch("boto3.Session") as mock_session:
            mock_session.return_value.client.return_value.describe_task_definition.return_value = {
                "taskDefinition": {"taskDefinitionArn": "app:1"}
            }
            adapter = ECSAdapter(rate_limits=RateLimitsConfig(ecs_api=10))

            document = await adapter.describe_revision("app:1")

        assert isinstance(adapter.client, ECSClient)
        assert fresh_rate_limiter.is_registered(ECS_API)
        assert document == {"taskDefinitionArn": "app:1"}
