"""
Requester-pays resolution.

A configuration that sets `use_user_project_only_for_requester_pays`
asks for its `user_project` to be billed only when the bucket actually
requires it. The bucket is probed once per handle construction; buckets
that do not require it get a configuration with the user project cleared
and an adapter that bills nobody.
"""

import logging

from .configuration import ClientOptions, StorageConfiguration
from .errors import ConfigurationError, ResolutionError
from .provider_cache import ConfigKey, ProviderCache
from .storage_protocols import StorageAdapter

logger = logging.getLogger(__name__)


def check_requester_pays_configuration(configuration: StorageConfiguration) -> None:
    """Fail if conditional billing is requested without a project to bill."""
    if configuration.requester_pays_only and not configuration.user_project:
        raise ConfigurationError(
            "If use_user_project_only_for_requester_pays is set, "
            "then user_project must be set too."
        )


def resolve_requester_pays(
    bucket: str,
    configuration: StorageConfiguration,
    adapter: StorageAdapter,
    cache: ProviderCache,
    options: ClientOptions | None = None,
) -> tuple[StorageConfiguration, StorageAdapter]:
    """
    Decide the configuration and adapter a handle for `bucket` should use.

    Returns the inputs unchanged unless conditional billing is on and the
    bucket turns out not to be requester-pays.
    """
    if not configuration.requester_pays_only:
        return configuration, adapter

    check_requester_pays_configuration(configuration)

    try:
        is_requester_pays = adapter.requester_pays(bucket)
    except ResolutionError:
        raise
    except Exception as e:
        raise ResolutionError(
            f"Unable to determine requester-pays status of bucket '{bucket}'"
        ) from e

    if is_requester_pays:
        return configuration, adapter

    logger.info(
        "Bucket '%s' is not requester-pays; not billing project '%s'",
        bucket,
        configuration.user_project,
    )
    unbilled = configuration.with_overrides(user_project="")
    return unbilled, cache.resolve(ConfigKey(unbilled, options))
