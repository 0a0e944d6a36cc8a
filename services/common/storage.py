"""S3-backed object store used to fetch inputs and persist summaries."""
from __future__ import annotations

import logging
from typing import Any, Union

from botocore.exceptions import BotoCoreError, ClientError

from .errors import ObjectNotFoundError, StorageAccessError

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = {"404", "NotFound", "NoSuchKey", "NoSuchBucket"}


def _error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", ""))


class S3ObjectStore:
    """Thin wrapper over a boto3 S3 client that raises the summarizer's errors."""

    def __init__(self, client: Any) -> None:
        self._client = client

    def get(self, bucket: str, key: str) -> bytes:
        try:
            obj = self._client.get_object(Bucket=bucket, Key=key)
        except ClientError as exc:
            code = _error_code(exc)
            if code in _NOT_FOUND_CODES:
                raise ObjectNotFoundError(
                    f"s3://{bucket}/{key} does not exist", bucket=bucket, key=key
                ) from exc
            raise StorageAccessError(
                f"failed to read s3://{bucket}/{key}: {code or exc}", bucket=bucket, key=key
            ) from exc
        except BotoCoreError as exc:
            raise StorageAccessError(f"failed to read s3://{bucket}/{key}: {exc}", bucket=bucket, key=key) from exc

        body = obj["Body"]
        try:
            data = body.read()
        except BotoCoreError as exc:
            raise StorageAccessError(f"failed to read s3://{bucket}/{key}: {exc}", bucket=bucket, key=key) from exc
        finally:
            closer = getattr(body, "close", None)
            if callable(closer):
                closer()

        logger.debug("fetched %d bytes from s3://%s/%s", len(data), bucket, key)
        return bytes(data)

    def put(
        self,
        bucket: str,
        key: str,
        body: Union[str, bytes],
        content_type: str = "application/octet-stream",
    ) -> None:
        payload = body.encode("utf-8") if isinstance(body, str) else bytes(body)
        try:
            self._client.put_object(Bucket=bucket, Key=key, Body=payload, ContentType=content_type)
        except ClientError as exc:
            raise StorageAccessError(
                f"failed to write s3://{bucket}/{key}: {_error_code(exc) or exc}", bucket=bucket, key=key
            ) from exc
        except BotoCoreError as exc:
            raise StorageAccessError(f"failed to write s3://{bucket}/{key}: {exc}", bucket=bucket, key=key) from exc
