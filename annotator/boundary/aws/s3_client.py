"""
S3 client for session artifact operations.

Implements the narrow ObjectStore interface on top of boto3: prefix
listing, whole-object get/put, delete and presigned download URLs.
Blocking boto3 calls run in worker threads so independent round trips can
be awaited concurrently. Retries for throttling and timeouts are handled
by botocore's "standard" retry mode; errors that survive it are translated
into the ObjectStoreError hierarchy.

Dependencies: boto3, botocore
System role: Object store boundary for all session artifacts
"""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

import boto3
from botocore.config import Config
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectionClosedError,
    ConnectTimeoutError,
    EndpointConnectionError,
    ReadTimeoutError,
)

from annotator.boundary.aws.object_store import RemoteObjectRef
from annotator.core.exceptions import (
    ObjectNotFoundError,
    ObjectStoreError,
    PresignError,
    TransientStoreError,
)

if TYPE_CHECKING:
    from annotator.configs.s3_storage import S3StorageSettings

logger = logging.getLogger(__name__)

NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}

TRANSIENT_CODES = {
    "Throttling",
    "ThrottlingException",
    "SlowDown",
    "RequestLimitExceeded",
    "RequestTimeout",
    "RequestTimeoutException",
    "ServiceUnavailable",
    "InternalError",
    "500",
    "503",
}

TRANSIENT_BOTOCORE_ERRORS = (
    EndpointConnectionError,
    ConnectTimeoutError,
    ReadTimeoutError,
    ConnectionClosedError,
)


def translate_error(error: Exception, operation: str, key: str) -> ObjectStoreError:
    """
    Map a boto3/botocore exception onto the ObjectStoreError hierarchy.

    Args:
        error: Exception raised by boto3
        operation: Operation name for context
        key: Object key or prefix

    Returns:
        ObjectStoreError: NotFound, Transient or generic store error
    """
    if isinstance(error, ClientError):
        error_code = error.response.get("Error", {}).get("Code", "Unknown")
        if error_code in NOT_FOUND_CODES:
            return ObjectNotFoundError(key, operation)
        if error_code in TRANSIENT_CODES:
            return TransientStoreError(
                f"S3 {operation} throttled or timed out: {error_code}", operation, key
            )
        return ObjectStoreError(f"S3 {operation} failed: {error_code}", operation, key)
    if isinstance(error, TRANSIENT_BOTOCORE_ERRORS):
        return TransientStoreError(f"S3 {operation} unreachable: {error}", operation, key)
    return ObjectStoreError(f"S3 {operation} failed: {error}", operation, key)


def create_boto3_client(settings: "S3StorageSettings"):
    """
    Build a boto3 S3 client from settings.

    Static keys are used when configured; otherwise the default credential
    chain applies. When a role ARN is set it is assumed through STS first.

    Args:
        settings: S3 storage settings

    Returns:
        botocore client for S3
    """
    config = Config(
        retries={"max_attempts": settings.max_attempts, "mode": "standard"},
        connect_timeout=settings.connect_timeout,
        read_timeout=settings.read_timeout,
    )
    session = boto3.session.Session(
        aws_access_key_id=settings.access_key_id,
        aws_secret_access_key=settings.secret_access_key,
        region_name=settings.region,
    )

    if settings.role_arn:
        credentials = session.client("sts", config=config).assume_role(
            RoleArn=settings.role_arn,
            RoleSessionName="screen-annotator",
        )["Credentials"]
        session = boto3.session.Session(
            aws_access_key_id=credentials["AccessKeyId"],
            aws_secret_access_key=credentials["SecretAccessKey"],
            aws_session_token=credentials["SessionToken"],
            region_name=settings.region,
        )
        logger.info(f"{__name__}:create_boto3_client - Assumed role {settings.role_arn}")

    return session.client("s3", config=config)


class S3ObjectStore:
    """S3 client for session artifacts (list/get/put/delete/presign)."""

    def __init__(self, bucket: str, region: str = "us-east-1", s3_client=None) -> None:
        """
        Initialize S3 client for the session bucket.

        Args:
            bucket: S3 bucket name for session storage
            region: AWS region for S3 bucket
            s3_client: Preconfigured boto3 S3 client (created from region if None)
        """
        self._bucket = bucket
        self._region = region
        self._s3_client = s3_client or boto3.client("s3", region_name=region)

    @classmethod
    def from_settings(cls, settings: "S3StorageSettings") -> "S3ObjectStore":
        """Create a store with credentials, role and retry policy from settings."""
        return cls(
            bucket=settings.bucket_name,
            region=settings.region,
            s3_client=create_boto3_client(settings),
        )

    @property
    def bucket(self) -> str:
        return self._bucket

    def _list_all(self, prefix: str) -> list[RemoteObjectRef]:
        paginator = self._s3_client.get_paginator("list_objects_v2")
        refs = []
        for page in paginator.paginate(Bucket=self._bucket, Prefix=prefix):
            for item in page.get("Contents", []):
                refs.append(
                    RemoteObjectRef(
                        key=item["Key"],
                        last_modified=item.get("LastModified"),
                        size=item.get("Size", 0),
                    )
                )
        return refs

    async def list_objects(self, prefix: str) -> list[RemoteObjectRef]:
        """
        List every object under a prefix.

        Args:
            prefix: Key prefix (e.g. "alice/metadata/")

        Returns:
            list[RemoteObjectRef]: Keys with last-modified time and size

        Raises:
            ObjectStoreError: If listing fails
        """
        try:
            refs = await asyncio.to_thread(self._list_all, prefix)
        except (ClientError, BotoCoreError) as e:
            raise translate_error(e, "list", prefix) from e
        logger.debug(f"{__name__}:list_objects - prefix={prefix} count={len(refs)}")
        return refs

    async def get_object(self, key: str) -> bytes:
        """
        Read a whole object.

        Args:
            key: S3 object key

        Returns:
            bytes: Object body

        Raises:
            ObjectNotFoundError: If the key does not exist
            ObjectStoreError: If the read fails for any other reason
        """

        def _read() -> bytes:
            response = self._s3_client.get_object(Bucket=self._bucket, Key=key)
            return response["Body"].read()

        try:
            return await asyncio.to_thread(_read)
        except (ClientError, BotoCoreError) as e:
            raise translate_error(e, "get", key) from e

    async def put_object(
        self,
        key: str,
        body: bytes,
        content_type: str = "application/octet-stream",
    ) -> None:
        """
        Write a whole object, replacing any previous version.

        Args:
            key: S3 object key
            body: Object body
            content_type: MIME type stored with the object

        Raises:
            ObjectStoreError: If the write fails
        """
        try:
            await asyncio.to_thread(
                self._s3_client.put_object,
                Bucket=self._bucket,
                Key=key,
                Body=body,
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as e:
            raise translate_error(e, "put", key) from e
        logger.info(f"{__name__}:put_object - Uploaded s3://{self._bucket}/{key} size={len(body)}")

    async def delete_object(self, key: str) -> None:
        """
        Delete an object.

        S3 deletes succeed silently for absent keys, so existence is checked
        first to report them as missing.

        Args:
            key: S3 object key

        Raises:
            ObjectNotFoundError: If the key does not exist
            ObjectStoreError: If the delete fails for any other reason
        """
        if not await self.file_exists(key):
            raise ObjectNotFoundError(key, "delete")
        try:
            await asyncio.to_thread(
                self._s3_client.delete_object, Bucket=self._bucket, Key=key
            )
        except (ClientError, BotoCoreError) as e:
            raise translate_error(e, "delete", key) from e
        logger.info(f"{__name__}:delete_object - Deleted s3://{self._bucket}/{key}")

    async def file_exists(self, key: str) -> bool:
        """
        Check if an object exists in S3.

        Args:
            key: S3 object key to check

        Returns:
            bool: True if object exists, False otherwise
        """
        try:
            await asyncio.to_thread(
                self._s3_client.head_object, Bucket=self._bucket, Key=key
            )
            return True
        except (ClientError, BotoCoreError) as e:
            error = translate_error(e, "head", key)
            if isinstance(error, ObjectNotFoundError):
                return False
            raise error from e

    async def generate_presigned_download_url(
        self,
        key: str,
        expires_in: int = 3600,
    ) -> tuple[str, datetime]:
        """
        Generate presigned URL for downloading/viewing an S3 object.

        Args:
            key: S3 object key (path in bucket)
            expires_in: URL expiry in seconds (default 1 hour)

        Returns:
            tuple[str, datetime]: (presigned_url, expires_at)

        Raises:
            PresignError: If presigned URL generation fails
        """
        try:
            presigned_url = await asyncio.to_thread(
                self._s3_client.generate_presigned_url,
                ClientMethod="get_object",
                Params={
                    "Bucket": self._bucket,
                    "Key": key,
                },
                ExpiresIn=expires_in,
            )
        except (ClientError, BotoCoreError) as e:
            raise PresignError(key, str(e)) from e
        expires_at = datetime.now(timezone.utc) + timedelta(seconds=expires_in)
        return presigned_url, expires_at
