"""Shared test fixtures: an in-memory stand-in for the boto3 S3 client."""

import threading
import time

import pytest
from botocore.exceptions import ClientError


def make_client_error(operation: str, code: str = "AccessDenied", message: str = "Access Denied"):
    return ClientError({"Error": {"Code": code, "Message": message}}, operation)


def version_page(versions=(), markers=()):
    """Build one ListObjectVersions page from (key, version_id) pairs."""
    page = {}
    if versions:
        page["Versions"] = [{"Key": k, "VersionId": v} for k, v in versions]
    if markers:
        page["DeleteMarkers"] = [{"Key": k, "VersionId": v} for k, v in markers]
    return page


class FakePaginator:
    """
    Yields pages lazily, like botocore's PageIterator.

    `before_page(index)` runs just before page `index` is handed out;
    `fetched` counts pages handed out so far.
    """

    def __init__(self, pages, fail_at_page=None, before_page=None):
        self.pages = pages
        self.fail_at_page = fail_at_page
        self.before_page = before_page
        self.calls = []
        self.fetched = 0

    def paginate(self, **kwargs):
        self.calls.append(kwargs)
        for index, page in enumerate(self.pages):
            if self.before_page is not None:
                self.before_page(index)
            if index == self.fail_at_page:
                raise make_client_error("ListObjectVersions")
            self.fetched += 1
            yield page
        if self.fail_at_page is not None and self.fail_at_page >= len(self.pages):
            raise make_client_error("ListObjectVersions")


class FakeS3Client:
    """
    Just enough of the S3 client for a purge run.

    Keys listed in `failing_keys` come back as per-item errors; with
    `fail_deletes` every DeleteObjects call raises ClientError;
    `extra_errors` appends that many bogus error entries to each response.
    """

    def __init__(self, pages=(), fail_at_page=None, failing_keys=(), fail_deletes=False,
                 delete_delay=0.0, before_page=None, extra_errors=0):
        self.paginator = FakePaginator(list(pages), fail_at_page, before_page)
        self.failing_keys = set(failing_keys)
        self.fail_deletes = fail_deletes
        self.delete_delay = delete_delay
        self.extra_errors = extra_errors
        self.delete_calls = []
        self.in_flight = 0
        self.max_in_flight = 0
        self._lock = threading.Lock()

    def get_paginator(self, operation_name):
        assert operation_name == "list_object_versions"
        return self.paginator

    def delete_objects(self, Bucket, Delete):
        with self._lock:
            self.delete_calls.append({"Bucket": Bucket, "Delete": Delete})
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)

        try:
            if self.delete_delay:
                time.sleep(self.delete_delay)
            if self.fail_deletes:
                raise make_client_error("DeleteObjects", "InternalError", "We encountered an internal error")

            errors = [
                {**obj, "Code": "AccessDenied", "Message": "Access Denied"}
                for obj in Delete["Objects"]
                if obj["Key"] in self.failing_keys
            ]
            errors += [
                {"Key": f"unknown/{i}", "VersionId": "x", "Code": "InternalError", "Message": "?"}
                for i in range(self.extra_errors)
            ]
            return {"Errors": errors} if errors else {}
        finally:
            with self._lock:
                self.in_flight -= 1

    @property
    def deleted_batch_sizes(self):
        return sorted((len(call["Delete"]["Objects"]) for call in self.delete_calls), reverse=True)


@pytest.fixture
def make_client():
    """Factory fixture for FakeS3Client."""
    return FakeS3Client
