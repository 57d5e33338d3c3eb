"""Integration test fixtures and configuration."""

import os

import boto3
import pytest
from botocore.exceptions import BotoCoreError, ClientError


@pytest.fixture
def aws_test_region() -> str:
    """AWS region for integration tests."""
    return os.getenv("AWS_TEST_REGION", "us-east-1")


@pytest.fixture
def skip_if_no_aws_credentials(aws_test_region: str):
    """Skip test if AWS credentials are not available."""
    try:
        sts = boto3.client("sts", region_name=aws_test_region)
        sts.get_caller_identity()
    except (BotoCoreError, ClientError) as e:
        pytest.skip(f"AWS credentials not available: {e}")


@pytest.fixture
def ecs_test_service() -> tuple[str, str]:
    """Existing cluster and service to read from.

    Uses environment variables:
    - ECS_TEST_CLUSTER
    - ECS_TEST_SERVICE
    """
    cluster = os.getenv("ECS_TEST_CLUSTER")
    service = os.getenv("ECS_TEST_SERVICE")
    if not cluster or not service:
        pytest.skip("Set ECS_TEST_CLUSTER and ECS_TEST_SERVICE to test against a real service.")
    return cluster, service
