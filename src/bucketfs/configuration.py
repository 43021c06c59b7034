import os
from dataclasses import dataclass, field, fields, replace
from typing import Any, Mapping

from .errors import ConfigurationError

BLOCK_SIZE_DEFAULT = 2 * 1024 * 1024

# Keys accepted by from_mapping in addition to the field names themselves.
_CAMEL_CASE_KEYS = {
    "workingDirectory": "working_directory",
    "permitEmptyPathComponents": "permit_empty_path_components",
    "stripPrefixSlash": "strip_prefix_slash",
    "usePseudoDirectories": "use_pseudo_directories",
    "blockSize": "block_size",
    "maxChannelReopens": "max_channel_reopens",
    "userProject": "user_project",
    "useUserProjectOnlyForRequesterPaysBuckets": "use_user_project_only_for_requester_pays",
    "retryableHttpCodes": "retryable_http_codes",
}

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class StorageConfiguration:
    """
    Immutable settings shared by every filesystem handle built from it.

    Instances are hashable and compare structurally, so they double as
    cache keys. Use `with_overrides` to derive a modified copy.
    """

    working_directory: str = "/"
    permit_empty_path_components: bool = False
    strip_prefix_slash: bool = True
    use_pseudo_directories: bool = True
    block_size: int = BLOCK_SIZE_DEFAULT
    max_channel_reopens: int = 0
    user_project: str = ""
    use_user_project_only_for_requester_pays: bool = False
    retryable_http_codes: tuple[int, ...] = field(default=(500, 502, 503))

    def __post_init__(self) -> None:
        if not self.working_directory.startswith("/"):
            raise ConfigurationError(
                f"working_directory must be absolute: {self.working_directory!r}"
            )
        if self.block_size <= 0:
            raise ConfigurationError(f"block_size must be positive: {self.block_size}")
        if self.max_channel_reopens < 0:
            raise ConfigurationError(
                f"max_channel_reopens must not be negative: {self.max_channel_reopens}"
            )
        if self.user_project is None:
            object.__setattr__(self, "user_project", "")
        # Lists are accepted for convenience but would break hashing.
        object.__setattr__(
            self, "retryable_http_codes", tuple(self.retryable_http_codes)
        )

    @property
    def requester_pays_only(self) -> bool:
        return self.use_user_project_only_for_requester_pays

    def with_overrides(self, **changes: Any) -> "StorageConfiguration":
        """Return a new configuration with `changes` applied."""
        unknown = set(changes) - _field_names()
        if unknown:
            raise ConfigurationError(
                f"Unknown configuration keys: {', '.join(sorted(unknown))}"
            )
        return replace(self, **changes)

    @classmethod
    def from_mapping(
        cls,
        mapping: Mapping[str, Any],
        base: "StorageConfiguration | None" = None,
    ) -> "StorageConfiguration":
        """
        Build a configuration from a string-keyed mapping.

        Both snake_case field names and the camelCase spellings
        (e.g. ``userProject``) are accepted. Values override `base`,
        or the defaults when `base` is None.
        """
        changes: dict[str, Any] = {}
        for key, value in mapping.items():
            name = _CAMEL_CASE_KEYS.get(key, key)
            if name not in _field_names():
                raise ConfigurationError(f"Unknown configuration key: {key!r}")
            changes[name] = value
        return (base or cls()).with_overrides(**changes)

    @classmethod
    def from_env(
        cls, environ: Mapping[str, str] | None = None
    ) -> "StorageConfiguration":
        # Unset variables keep the defaults.
        env = os.environ if environ is None else environ
        changes: dict[str, Any] = {}
        if "BUCKETFS_USER_PROJECT" in env:
            changes["user_project"] = env["BUCKETFS_USER_PROJECT"]
        if "BUCKETFS_REQUESTER_PAYS_ONLY" in env:
            changes["use_user_project_only_for_requester_pays"] = (
                env["BUCKETFS_REQUESTER_PAYS_ONLY"].strip().lower() in _TRUE_VALUES
            )
        if "BUCKETFS_WORKING_DIRECTORY" in env:
            changes["working_directory"] = env["BUCKETFS_WORKING_DIRECTORY"]
        try:
            if "BUCKETFS_BLOCK_SIZE" in env:
                changes["block_size"] = int(env["BUCKETFS_BLOCK_SIZE"])
            if "BUCKETFS_MAX_CHANNEL_REOPENS" in env:
                changes["max_channel_reopens"] = int(env["BUCKETFS_MAX_CHANNEL_REOPENS"])
        except ValueError as e:
            raise ConfigurationError(f"Invalid numeric setting: {e}") from e
        return cls(**changes)


@dataclass(frozen=True)
class ClientOptions:
    """
    How the storage client connects.

    `None` in place of a ClientOptions instance means "default
    credentials and endpoint".
    """

    project: str | None = None
    credentials_file: str | None = None
    api_endpoint: str | None = None
    anonymous: bool = False


def _field_names() -> set[str]:
    return {f.name for f in fields(StorageConfiguration)}


_user_specified_default: StorageConfiguration | None = None


def set_default_configuration(configuration: StorageConfiguration | None) -> None:
    """Set the configuration used when a bucket is opened without one.

    Passing None restores the built-in defaults.
    """
    global _user_specified_default
    _user_specified_default = configuration


def get_default_configuration() -> StorageConfiguration:
    if _user_specified_default is None:
        return StorageConfiguration()
    return _user_specified_default
