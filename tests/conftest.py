import boto3
import pytest
from moto import mock_aws

from docstore.config import Settings
from docstore.service import StorageService
from docstore.storage import S3ObjectStore

TEST_BUCKET = "docstore-test"


@pytest.fixture
def aws_credentials(monkeypatch):
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")


@pytest.fixture
def s3_client(aws_credentials):
    """In-memory S3 with the test bucket created."""
    with mock_aws():
        client = boto3.client("s3", region_name="us-east-1")
        client.create_bucket(Bucket=TEST_BUCKET)
        yield client


@pytest.fixture
def settings():
    return Settings(_env_file=None, s3_bucket_name=TEST_BUCKET, download_url_expiry_seconds=900)


@pytest.fixture
def store(s3_client):
    return S3ObjectStore(s3_client, TEST_BUCKET)


@pytest.fixture
def service(store, settings):
    return StorageService(store, settings)


@pytest.fixture
def put_objects(s3_client):
    def _put(*keys: str, body: bytes = b"data") -> None:
        for key in keys:
            s3_client.put_object(Bucket=TEST_BUCKET, Key=key, Body=b"" if key.endswith("/") else body)

    return _put
