"""
AWS boundary modules.

Exports: S3ObjectStore, ObjectStore, RemoteObjectRef
"""

from .object_store import ObjectStore, RemoteObjectRef
from .s3_client import S3ObjectStore

__all__ = ["ObjectStore", "RemoteObjectRef", "S3ObjectStore"]
