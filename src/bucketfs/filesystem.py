import logging
import re
from datetime import datetime, timezone
from typing import Callable

from .configuration import (
    ClientOptions,
    StorageConfiguration,
    get_default_configuration,
)
from .errors import BucketNameError, UnsupportedOperationError
from .gcs_adapter import GCSAdapter
from .paths import ROOT, SEPARATOR, BucketPath, PosixPathResolver
from .provider_cache import ConfigKey, ProviderCache, default_provider_cache
from .requester_pays import check_requester_pays_configuration, resolve_requester_pays
from .storage_protocols import AdapterFactory, PathResolver, StorageAdapter

logger = logging.getLogger(__name__)

URI_SCHEME = "gs"
BASIC_VIEW = "basic"
GCS_VIEW = "gcs"
POSIX_VIEW = "posix"
SUPPORTED_VIEWS = frozenset({BASIC_VIEW, GCS_VIEW, POSIX_VIEW})
FILE_TIME_UNKNOWN = datetime.fromtimestamp(0, tz=timezone.utc)


class BucketFileSystem:
    """
    Filesystem view of a single bucket.

    Handles are cheap and hold no resources of their own: open as many as
    you like, for the same bucket or not. Two handles are equal when they
    name the same bucket under equal configurations; the adapter they
    happen to use is not part of their identity.
    """

    def __init__(
        self,
        adapter: StorageAdapter,
        bucket: str,
        configuration: StorageConfiguration,
        path_resolver: PathResolver | None = None,
    ) -> None:
        if not bucket:
            raise BucketNameError("Bucket name must not be empty")
        self._adapter = adapter
        self._bucket = bucket
        self._configuration = configuration
        self._path_resolver = path_resolver or PosixPathResolver(URI_SCHEME)

    @classmethod
    def for_bucket(
        cls,
        bucket: str,
        configuration: StorageConfiguration | None = None,
        options: ClientOptions | None = None,
        *,
        cache: ProviderCache | None = None,
        path_resolver: PathResolver | None = None,
    ) -> "BucketFileSystem":
        """
        Open `bucket` under `configuration`.

        The storage adapter comes from `cache` (the process-wide cache by
        default), so repeated calls with equal arguments share one adapter.
        When the configuration bills its user project only to
        requester-pays buckets, the bucket is probed before returning.
        """
        if not isinstance(bucket, str) or not bucket:
            raise BucketNameError(f"Bucket name must be a non-empty string: {bucket!r}")
        if bucket.startswith(f"{URI_SCHEME}:"):
            raise BucketNameError(f"Bucket name must not have schema: {bucket}")
        if configuration is None:
            configuration = get_default_configuration()
        if cache is None:
            cache = default_provider_cache()

        # Must fail before the cache can build anything.
        check_requester_pays_configuration(configuration)

        adapter = cache.resolve(ConfigKey(configuration, options))
        configuration, adapter = resolve_requester_pays(
            bucket, configuration, adapter, cache, options
        )
        filesystem = cls(adapter, bucket, configuration, path_resolver)
        logger.debug("Opened %s with %r", filesystem, adapter)
        return filesystem

    @property
    def adapter(self) -> StorageAdapter:
        return self._adapter

    @property
    def bucket(self) -> str:
        return self._bucket

    @property
    def configuration(self) -> StorageConfiguration:
        return self._configuration

    @property
    def separator(self) -> str:
        return SEPARATOR

    def path(self, first: str, *more: str) -> BucketPath:
        """Convert object name segments to a BucketPath."""
        if first.startswith(f"{URI_SCHEME}:"):
            raise BucketNameError(
                f"BucketFileSystem.path() must not have schema and bucket name: {first}"
            )
        return self._path_resolver.resolve(self, first, *more)

    def root_directories(self) -> tuple[BucketPath, ...]:
        return (self._path_resolver.resolve(self, ROOT),)

    def file_stores(self) -> tuple:
        """Object storage has no disk partitions, so there is nothing to return."""
        return ()

    def supported_attribute_views(self) -> frozenset[str]:
        return SUPPORTED_VIEWS

    def path_matcher(self, syntax_and_pattern: str) -> Callable[[BucketPath], bool]:
        """
        Return a predicate for ``glob:<pattern>`` or ``regex:<pattern>``.

        In globs ``*`` and ``?`` stay within one path component, ``**``
        crosses components and ``{a,b}`` matches either alternative.
        A backslash makes the next character literal.
        """
        syntax, sep, pattern = syntax_and_pattern.partition(":")
        if not sep:
            raise ValueError(f"Expected '<syntax>:<pattern>', got {syntax_and_pattern!r}")
        if syntax == "glob":
            compiled = re.compile(_glob_to_regex(pattern))
        elif syntax == "regex":
            compiled = re.compile(pattern)
        else:
            raise UnsupportedOperationError(
                "path_matcher", f"Syntax '{syntax}' not recognized"
            )
        return lambda path: compiled.fullmatch(str(path)) is not None

    def close(self) -> None:
        """Does nothing; handles own no resources."""
        pass

    def is_open(self) -> bool:
        """Always True, even after close()."""
        return True

    def is_read_only(self) -> bool:
        return False

    def user_principal_lookup_service(self):
        raise UnsupportedOperationError("user_principal_lookup_service")

    def new_watch_service(self):
        raise UnsupportedOperationError("new_watch_service")

    def __enter__(self) -> "BucketFileSystem":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, BucketFileSystem):
            return NotImplemented
        return (
            self._bucket == other._bucket
            and self._configuration == other._configuration
        )

    def __hash__(self) -> int:
        return hash((self._bucket, self._configuration))

    def __str__(self) -> str:
        # The bucket is the URI authority.
        return f"{URI_SCHEME}://{self._bucket}"

    def __repr__(self) -> str:
        return f"BucketFileSystem({str(self)!r})"


def open_bucket(
    bucket: str,
    configuration: StorageConfiguration | None = None,
    options: ClientOptions | None = None,
    *,
    cache: ProviderCache | None = None,
    path_resolver: PathResolver | None = None,
) -> BucketFileSystem:
    """Shorthand for BucketFileSystem.for_bucket."""
    return BucketFileSystem.for_bucket(
        bucket, configuration, options, cache=cache, path_resolver=path_resolver
    )


def list_buckets(
    project: str | None = None,
    prefix: str | None = None,
    factory: AdapterFactory = GCSAdapter.create,
) -> list[str]:
    """List bucket names in `project` (the default project when None)."""
    adapter = factory("", ClientOptions(project=project))
    try:
        return adapter.list_buckets(prefix)
    finally:
        adapter.close()


def _glob_to_regex(pattern: str) -> str:
    out = []
    i = 0
    in_group = False
    while i < len(pattern):
        c = pattern[i]
        if c == "\\":
            if i + 1 == len(pattern):
                raise ValueError(f"Trailing escape in glob pattern: {pattern!r}")
            out.append(re.escape(pattern[i + 1]))
            i += 1
        elif c == "*":
            if pattern.startswith("**", i):
                out.append(".*")
                i += 1
            else:
                out.append("[^/]*")
        elif c == "?":
            out.append("[^/]")
        elif c == "{" and not in_group:
            out.append("(?:")
            in_group = True
        elif c == "}" and in_group:
            out.append(")")
            in_group = False
        elif c == "," and in_group:
            out.append("|")
        elif c == "[":
            end = pattern.find("]", i + 1)
            if end == -1:
                out.append(re.escape(c))
            else:
                body = pattern[i + 1 : end]
                if body.startswith("!"):
                    body = "^" + body[1:]
                out.append(f"[{body}]")
                i = end
        else:
            out.append(re.escape(c))
        i += 1
    if in_group:
        raise ValueError(f"Unclosed group in glob pattern: {pattern!r}")
    return "".join(out)
