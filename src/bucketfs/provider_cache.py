import logging
import threading
from dataclasses import dataclass

from .configuration import ClientOptions, StorageConfiguration
from .errors import ResolutionError
from .gcs_adapter import GCSAdapter
from .storage_protocols import AdapterFactory, StorageAdapter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConfigKey:
    """Cache key pairing a configuration with the client options it connects with."""

    configuration: StorageConfiguration
    options: ClientOptions | None = None

    def __post_init__(self) -> None:
        if self.configuration is None:
            raise TypeError("ConfigKey requires a configuration")


class _KeyLock:
    """Construction lock for one key and the number of threads using it."""

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.waiters = 0


class ProviderCache:
    """
    Memoizes storage adapters per ConfigKey.

    At most one adapter is built per key, even when several threads ask
    for the same key at once. Keys are locked individually so a slow
    construction never holds up other keys. Failed constructions are not
    cached. Entries are never evicted.
    """

    def __init__(self, factory: AdapterFactory = GCSAdapter.create) -> None:
        self._factory = factory
        self._adapters: dict[ConfigKey, StorageAdapter] = {}
        self._locks: dict[ConfigKey, _KeyLock] = {}
        self._guard = threading.Lock()

    def resolve(self, key: ConfigKey) -> StorageAdapter:
        adapter = self._adapters.get(key)
        if adapter is not None:
            logger.debug("Reusing storage adapter for %s", key)
            return adapter

        with self._guard:
            entry = self._locks.setdefault(key, _KeyLock())
            entry.waiters += 1

        try:
            with entry.lock:
                # Another thread may have finished while we waited.
                adapter = self._adapters.get(key)
                if adapter is not None:
                    return adapter

                logger.debug("Building storage adapter for %s", key)
                try:
                    adapter = self._factory(
                        key.configuration.user_project, key.options
                    )
                except Exception as e:
                    raise ResolutionError(
                        "Unable to resolve storage adapter for the provided configuration"
                    ) from e

                self._adapters[key] = adapter
                return adapter
        finally:
            # Drop the lock once nobody is queued on it, success or not.
            with self._guard:
                entry.waiters -= 1
                if entry.waiters == 0 and self._locks.get(key) is entry:
                    del self._locks[key]

    def clear(self) -> None:
        """Forget every cached adapter without closing them."""
        with self._guard:
            self._adapters.clear()
            self._locks.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._adapters

    def __len__(self) -> int:
        return len(self._adapters)


_default_cache: ProviderCache | None = None
_default_cache_lock = threading.Lock()


def default_provider_cache() -> ProviderCache:
    """Process-wide cache used when callers do not supply their own."""
    global _default_cache
    with _default_cache_lock:
        if _default_cache is None:
            _default_cache = ProviderCache()
        return _default_cache
