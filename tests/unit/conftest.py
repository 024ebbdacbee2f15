"""Shared pytest fixtures for nem12-sql unit tests."""

import os
from collections.abc import Generator
from pathlib import Path
from unittest.mock import MagicMock

import boto3
import pytest
from moto import mock_aws
from mypy_boto3_s3 import S3Client


# ==================== Paths ====================


@pytest.fixture
def fixtures_dir() -> Path:
    """Return path to test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def nem12_sample_file(fixtures_dir: Path) -> str:
    """Two meters: NEM1201009 (30 min, 2 days) and NEM1201010 (15 min, 1 day)."""
    return str(fixtures_dir / "nem12_sample.csv")


@pytest.fixture
def nem12_duplicates_file(fixtures_dir: Path) -> str:
    """E1 and E2 channels of NEM1201009 for the same day, colliding on every interval."""
    return str(fixtures_dir / "nem12_duplicates.csv")


@pytest.fixture
def nem12_errors_file(fixtures_dir: Path) -> str:
    """Four bad lines among valid ones, plus a blank line and skipped values."""
    return str(fixtures_dir / "nem12_errors.csv")


# ==================== AWS Mocks ====================


@pytest.fixture
def aws_credentials() -> None:
    """Mock AWS credentials for moto."""
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "ap-southeast-2"


@pytest.fixture
def mock_s3(aws_credentials: None) -> Generator[S3Client]:
    """Mock S3 with upload and output buckets; the shared lazy client is reset."""
    import shared.sources

    with mock_aws():
        shared.sources._s3_client = None
        s3 = boto3.client("s3", region_name="ap-southeast-2")

        s3.create_bucket(Bucket="nem12-uploads", CreateBucketConfiguration={"LocationConstraint": "ap-southeast-2"})
        s3.create_bucket(Bucket="nem12-sql-output", CreateBucketConfiguration={"LocationConstraint": "ap-southeast-2"})

        yield s3

        shared.sources._s3_client = None


@pytest.fixture
def mock_lambda_context() -> MagicMock:
    """Create a mock Lambda context for testing."""
    context = MagicMock()
    context.function_name = "nem12-processor"
    context.memory_limit_in_mb = 512
    context.invoked_function_arn = "arn:aws:lambda:ap-southeast-2:123456789012:function:nem12-processor"
    context.aws_request_id = "test-request-id"
    return context
