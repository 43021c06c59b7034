from typing import TYPE_CHECKING, Protocol

from .configuration import ClientOptions

if TYPE_CHECKING:
    from .filesystem import BucketFileSystem
    from .paths import BucketPath


class StorageAdapter(Protocol):
    """Protocol for a connection-ready storage backend."""

    @property
    def billing_project(self) -> str:
        """Project billed for requests, or "" for the bucket owner."""
        ...

    @property
    def options(self) -> ClientOptions | None:
        """Options the adapter was built with."""
        ...

    def requester_pays(self, bucket: str) -> bool:
        """Return True if reads from `bucket` must be billed to the caller."""
        ...

    def list_buckets(self, prefix: str | None = None) -> list[str]:
        """List bucket names visible to the adapter's project."""
        ...

    def close(self) -> None:
        """Close any resources/connections."""
        ...


class AdapterFactory(Protocol):
    """Builds a StorageAdapter for a billing project and client options."""

    def __call__(
        self, billing_project: str, options: ClientOptions | None
    ) -> StorageAdapter: ...


class PathResolver(Protocol):
    """Turns string segments into paths on a filesystem handle."""

    def resolve(
        self, filesystem: "BucketFileSystem", first: str, *more: str
    ) -> "BucketPath": ...
