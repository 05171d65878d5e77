from dataclasses import dataclass
from datetime import datetime
from typing import Any

import boto3
from botocore.exceptions import ClientError

from docstore.config import Settings

NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}


@dataclass(frozen=True)
class ObjectSummary:
    key: str
    size: int
    last_modified: datetime


class S3ObjectStore:
    """S3-compatible bucket (AWS S3, MinIO, Spaces)."""

    def __init__(self, client: Any, bucket: str):
        self._client = client
        self.bucket = bucket

    @classmethod
    def from_settings(cls, settings: Settings) -> "S3ObjectStore":
        extra = {} if settings.s3_endpoint_url is None else {"endpoint_url": settings.s3_endpoint_url}
        client = boto3.client(
            "s3",
            region_name=settings.s3_region,
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
            **extra,
        )
        return cls(client, settings.s3_bucket_name)

    def list_objects(self, *, prefix: str, max_keys: int) -> list[ObjectSummary]:
        response = self._client.list_objects_v2(Bucket=self.bucket, Prefix=prefix, MaxKeys=max_keys)
        return [
            ObjectSummary(key=item["Key"], size=item["Size"], last_modified=item["LastModified"])
            for item in response.get("Contents", [])
        ]

    def put_object(self, *, key: str, body: bytes, content_type: str, content_length: int) -> None:
        self._client.put_object(
            Bucket=self.bucket,
            Key=key,
            Body=body,
            ContentType=content_type,
            ContentLength=content_length,
        )

    def delete_object(self, key: str) -> None:
        self._client.delete_object(Bucket=self.bucket, Key=key)

    def head_object(self, key: str) -> ObjectSummary | None:
        try:
            head = self._client.head_object(Bucket=self.bucket, Key=key)
        except ClientError as exc:
            if exc.response["Error"]["Code"] in NOT_FOUND_CODES:
                return None
            raise
        return ObjectSummary(key=key, size=head["ContentLength"], last_modified=head["LastModified"])

    def presign_get_object(self, key: str, *, expires_in: int) -> str:
        return self._client.generate_presigned_url(
            "get_object",
            Params={"Bucket": self.bucket, "Key": key},
            ExpiresIn=expires_in,
        )
