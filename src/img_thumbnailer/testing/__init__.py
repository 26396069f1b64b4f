"""Test doubles and fixtures helpers for the thumbnailer."""

from .fakes import (
    EngineSpanRecorder,
    FakeLogger,
    FakeS3Client,
    StoredObject,
    create_test_image,
    write_credentials_file,
    write_test_image,
)

__all__ = [
    "EngineSpanRecorder",
    "FakeLogger",
    "FakeS3Client",
    "StoredObject",
    "create_test_image",
    "write_credentials_file",
    "write_test_image",
]
