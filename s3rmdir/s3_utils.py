"""
S3 Prefix Purge - S3 Utilities Module

boto3 client construction, paginated version listing and the single
DeleteObjects call each delete worker makes. Works against AWS or any
S3-compatible endpoint configured through S3_ENDPOINT.
"""

from typing import Iterable, Iterator, Optional

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from .config import S3
from .errors import ConfigurationError, DeleteRequestError, ListingError
from .models import BatchResult, ObjectVersionRef
from .utils import setup_logger

logger = setup_logger("s3_utils")


def get_s3_client(
    region: Optional[str] = None,
    endpoint_url: Optional[str] = None,
    max_workers: int = 10,
):
    """
    Get an S3 client for the purge run.

    The client is shared by the listing loop and every delete worker, so
    the connection pool is sized to the number of concurrent workers.

    Args:
        region: AWS region. Defaults to S3["REGION"]
        endpoint_url: S3-compatible endpoint. Defaults to S3["ENDPOINT"]
        max_workers: Maximum concurrent delete requests

    Returns:
        boto3 S3 client instance

    Raises:
        ConfigurationError: If no credentials are found or the region is invalid
    """
    region = region or S3["REGION"]
    endpoint_url = endpoint_url or S3["ENDPOINT"]

    try:
        session = boto3.Session(region_name=region)
        if session.get_credentials() is None:
            raise ConfigurationError(
                "unable to load AWS credentials: set AWS_ACCESS_KEY_ID/"
                "AWS_SECRET_ACCESS_KEY or configure a profile"
            )

        client = session.client(
            "s3",
            endpoint_url=endpoint_url,
            config=BotoConfig(
                retries={"max_attempts": S3["MAX_ATTEMPTS"], "mode": "standard"},
                max_pool_connections=max_workers + 1,
            ),
        )
    except BotoCoreError as e:
        raise ConfigurationError(f"unable to load SDK config: {e}") from e

    logger.debug(
        f"S3 client initialized: region={region}, "
        f"endpoint={endpoint_url or 'aws default'}"
    )
    return client


def iter_object_versions(client, bucket: str, prefix: str = "") -> Iterator[ObjectVersionRef]:
    """
    Yield every object version and delete marker under prefix.

    Within each page, versions are yielded before delete markers. Pages
    are fetched lazily, one at a time.

    Raises:
        ListingError: If fetching a page fails
    """
    paginator = client.get_paginator("list_object_versions")
    pages = iter(paginator.paginate(Bucket=bucket, Prefix=prefix))
    page_num = 0

    while True:
        try:
            page = next(pages)
        except StopIteration:
            return
        except (ClientError, BotoCoreError) as e:
            raise ListingError(f"failed to list objects: {e}") from e

        page_num += 1
        versions = page.get("Versions", [])
        markers = page.get("DeleteMarkers", [])
        logger.debug(
            f"Page {page_num}: {len(versions)} versions, {len(markers)} delete markers"
        )

        for version in versions:
            yield ObjectVersionRef(version["Key"], version["VersionId"])
        for marker in markers:
            yield ObjectVersionRef(marker["Key"], marker["VersionId"])


def delete_object_versions(client, bucket: str, batch: Iterable[ObjectVersionRef]) -> BatchResult:
    """
    Delete one batch of object versions with a single DeleteObjects request.

    Quiet mode is requested, so the response only itemizes failures.
    Per-item failures are counted, not retried.

    Args:
        client: boto3 S3 client
        bucket: Bucket name
        batch: Versions to delete (at most S3["MAX_DELETE_BATCH"])

    Returns:
        BatchResult with the batch size and the number of per-item errors

    Raises:
        DeleteRequestError: If the request itself fails or its response
            itemizes more errors than objects were sent
    """
    objects = [ref.to_identifier() for ref in batch]

    try:
        response = client.delete_objects(
            Bucket=bucket,
            Delete={"Objects": objects, "Quiet": True},
        )
    except (ClientError, BotoCoreError) as e:
        raise DeleteRequestError(f"failed to delete objects: {e}") from e

    errors = response.get("Errors", [])
    if len(errors) > len(objects):
        raise DeleteRequestError(
            f"delete response reported {len(errors)} errors for "
            f"{len(objects)} objects"
        )
    if errors:
        logger.warning(f"{len(errors)} of {len(objects)} objects in batch failed to delete")
        for err in errors:
            logger.debug(
                f"Delete failed: {err.get('Key')} ({err.get('VersionId')}) "
                f"[{err.get('Code')}] {err.get('Message')}"
            )

    return BatchResult(batch_size=len(objects), error_count=len(errors))
