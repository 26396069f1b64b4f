"""Fetch an image, resize it into a thumbnail and publish it to S3."""

__version__ = "0.1.0"
