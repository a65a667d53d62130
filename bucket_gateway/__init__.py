"""Credential-shielding HTTP gateway for multipart uploads and bucket operations."""

__version__ = "0.1.0"
