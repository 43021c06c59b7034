"""
bucketfs
========

Filesystem-shaped handles over Google Cloud Storage buckets.

Main entry points:
- open_bucket / BucketFileSystem.for_bucket: get a handle for a bucket
- StorageConfiguration, ClientOptions: what the handle is configured with
- ProviderCache: memoizes storage adapters per configuration
- GCSAdapter: google-cloud-storage backend
- BucketNameError, ConfigurationError, ResolutionError,
  UnsupportedOperationError: exceptions

Example:
    from bucketfs import StorageConfiguration, open_bucket

    config = StorageConfiguration(
        user_project="my-billing-project",
        use_user_project_only_for_requester_pays=True,
    )
    with open_bucket("my-bucket", config) as fs:
        path = fs.path("data", "file.csv")
"""

from .configuration import (
    BLOCK_SIZE_DEFAULT,
    ClientOptions,
    StorageConfiguration,
    get_default_configuration,
    set_default_configuration,
)
from .errors import (
    BucketFSError,
    BucketNameError,
    ConfigurationError,
    ResolutionError,
    UnsupportedOperationError,
)
from .filesystem import (
    BASIC_VIEW,
    FILE_TIME_UNKNOWN,
    GCS_VIEW,
    POSIX_VIEW,
    SUPPORTED_VIEWS,
    URI_SCHEME,
    BucketFileSystem,
    list_buckets,
    open_bucket,
)
from .gcs_adapter import GCSAdapter
from .paths import BucketPath, PosixPathResolver
from .provider_cache import ConfigKey, ProviderCache, default_provider_cache
from .requester_pays import resolve_requester_pays
from .storage_protocols import AdapterFactory, PathResolver, StorageAdapter

import importlib.metadata

try:
    __version__ = importlib.metadata.version(__name__)
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "BLOCK_SIZE_DEFAULT",
    "ClientOptions",
    "StorageConfiguration",
    "get_default_configuration",
    "set_default_configuration",
    "BucketFSError",
    "BucketNameError",
    "ConfigurationError",
    "ResolutionError",
    "UnsupportedOperationError",
    "BASIC_VIEW",
    "FILE_TIME_UNKNOWN",
    "GCS_VIEW",
    "POSIX_VIEW",
    "SUPPORTED_VIEWS",
    "URI_SCHEME",
    "BucketFileSystem",
    "list_buckets",
    "open_bucket",
    "GCSAdapter",
    "BucketPath",
    "PosixPathResolver",
    "ConfigKey",
    "ProviderCache",
    "default_provider_cache",
    "resolve_requester_pays",
    "AdapterFactory",
    "PathResolver",
    "StorageAdapter",
]
