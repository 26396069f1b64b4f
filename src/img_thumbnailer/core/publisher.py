"""Thumbnail upload to S3."""

import mimetypes
import os
import uuid
from typing import Any, Callable, Optional, TYPE_CHECKING

import boto3
import botocore.session
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from .exceptions import PublishError, PublishFailure
from .logging_config import get_logger
from .models import DEFAULT_CREDENTIALS_PROFILE, UploadResult
from .protocols import Publisher, S3ClientProtocol

if TYPE_CHECKING:
    from mypy_boto3_s3.client import S3Client
else:
    S3Client = Any

DEFAULT_CREDENTIALS_FILE = os.path.join("~", ".aws", "credentials")

S3ClientFactoryFn = Callable[[boto3.Session, str], S3ClientProtocol]


def object_location(bucket: str, region: str, key: str) -> str:
    """Virtual-hosted style URL of an S3 object."""
    return f"https://{bucket}.s3.{region}.amazonaws.com/{key}"


def create_s3_client(
    session: boto3.Session,
    region: str,
    connect_timeout: float = 10.0,
    read_timeout: float = 60.0,
) -> S3Client:
    """Create a single-attempt S3 client with bounded timeouts."""
    config = Config(
        connect_timeout=connect_timeout,
        read_timeout=read_timeout,
        retries={"total_max_attempts": 1, "mode": "standard"},
    )
    return session.client("s3", region_name=region, config=config)


class S3Publisher(Publisher):
    """Uploads files to S3 under random keys with a named credentials profile."""

    def __init__(
        self,
        profile: str = DEFAULT_CREDENTIALS_PROFILE,
        credentials_file: Optional[str] = None,
        client_factory: Optional[S3ClientFactoryFn] = None,
        connect_timeout: float = 10.0,
        read_timeout: float = 60.0,
    ):
        self._profile = profile
        self._credentials_file = os.path.expanduser(
            credentials_file or DEFAULT_CREDENTIALS_FILE
        )
        self._client_factory = client_factory
        self._connect_timeout = connect_timeout
        self._read_timeout = read_timeout

    def _session(self, region: str) -> boto3.Session:
        """Build a session whose only credential source is the profile."""
        try:
            core_session = botocore.session.Session()
            core_session.set_config_variable("credentials_file", self._credentials_file)
            core_session.set_config_variable("profile", self._profile)
            session = boto3.Session(botocore_session=core_session, region_name=region)
            credentials = session.get_credentials()
        except BotoCoreError as exc:
            raise PublishError(
                f"cannot load credentials for profile '{self._profile}' "
                f"from {self._credentials_file}: {exc}",
                kind=PublishFailure.CREDENTIALS,
            ) from exc
        if credentials is None:
            raise PublishError(
                f"no credentials for profile '{self._profile}' "
                f"in {self._credentials_file}",
                kind=PublishFailure.CREDENTIALS,
            )
        return session

    def publish(self, bucket: str, region: str, local_path: str) -> UploadResult:
        """
        Upload ``local_path`` to ``bucket`` under a fresh uuid4 key.

        Args:
            bucket: Destination bucket
            region: Region of the bucket
            local_path: File to upload

        Returns:
            The location of the new object

        Raises:
            PublishError: ``kind`` is LOCAL_IO, CREDENTIALS or STORAGE
        """
        logger = get_logger("img-thumbnailer.publisher")
        key = str(uuid.uuid4())
        content_type = mimetypes.guess_type(local_path)[0] or "application/octet-stream"

        try:
            fh = open(local_path, "rb")
        except OSError as exc:
            raise PublishError(
                f"Unable to open file: {exc}", kind=PublishFailure.LOCAL_IO
            ) from exc

        with fh:
            session = self._session(region)
            if self._client_factory is not None:
                s3_client = self._client_factory(session, region)
            else:
                s3_client = create_s3_client(
                    session, region, self._connect_timeout, self._read_timeout
                )
            logger.debug(f"Uploading {local_path} to s3://{bucket}/{key}")
            try:
                s3_client.put_object(
                    Bucket=bucket, Key=key, Body=fh, ContentType=content_type
                )
            except (ClientError, BotoCoreError) as exc:
                raise PublishError(
                    f"upload to s3://{bucket}/{key} failed: {exc}",
                    kind=PublishFailure.STORAGE,
                ) from exc
            except OSError as exc:
                raise PublishError(
                    f"Unable to read file: {exc}", kind=PublishFailure.LOCAL_IO
                ) from exc

        location = object_location(bucket, region, key)
        logger.info(f"Uploaded {local_path} to {location}")
        return UploadResult(url=location, bucket=bucket, key=key)
