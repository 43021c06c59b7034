import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .errors import BucketNameError

if TYPE_CHECKING:
    from .filesystem import BucketFileSystem

SEPARATOR = "/"
ROOT = "/"
_REPEATED_SEPARATORS = re.compile(r"/{2,}")


@dataclass(frozen=True)
class BucketPath:
    """A path to an object (or pseudo-directory) inside one bucket."""

    filesystem: "BucketFileSystem"
    raw: str

    def is_absolute(self) -> bool:
        return self.raw.startswith(SEPARATOR)

    def is_root(self) -> bool:
        return self.raw == ROOT

    @property
    def name(self) -> str:
        return self.raw.rstrip(SEPARATOR).rsplit(SEPARATOR, 1)[-1]

    @property
    def parts(self) -> tuple[str, ...]:
        return tuple(p for p in self.raw.split(SEPARATOR) if p)

    def to_absolute(self) -> "BucketPath":
        """Resolve against the configured working directory."""
        if self.is_absolute():
            return self
        working = self.filesystem.configuration.working_directory
        if not working.endswith(SEPARATOR):
            working += SEPARATOR
        return BucketPath(self.filesystem, working + self.raw)

    @property
    def object_name(self) -> str:
        """Name of the object this path maps to in the bucket."""
        absolute = self.to_absolute().raw
        if self.filesystem.configuration.strip_prefix_slash:
            return absolute[1:]
        return absolute

    @property
    def uri(self) -> str:
        return f"{self.filesystem}{self.to_absolute().raw}"

    def joinpath(self, *segments: str) -> "BucketPath":
        return self.filesystem.path(self.raw, *segments)

    def __truediv__(self, segment: str) -> "BucketPath":
        return self.joinpath(segment)

    def __str__(self) -> str:
        return self.raw

    def __repr__(self) -> str:
        return f"BucketPath({self.uri!r})"


class PosixPathResolver:
    """Joins string segments with "/" into BucketPath values."""

    def __init__(self, scheme: str = "gs") -> None:
        self._scheme_prefix = f"{scheme}:"

    def resolve(
        self, filesystem: "BucketFileSystem", first: str, *more: str
    ) -> BucketPath:
        for segment in (first, *more):
            if segment.startswith(self._scheme_prefix):
                raise BucketNameError(
                    f"Path segments must not carry a scheme or bucket name: {segment!r}"
                )

        joined = ""
        for segment in (first, *more):
            if not segment:
                continue
            if joined and not joined.endswith(SEPARATOR):
                joined += SEPARATOR
            joined += segment

        if not filesystem.configuration.permit_empty_path_components:
            joined = _REPEATED_SEPARATORS.sub(SEPARATOR, joined)
        return BucketPath(filesystem, joined)
