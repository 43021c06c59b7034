import threading
import time

import pytest

from bucketfs import ClientOptions, ProviderCache, set_default_configuration


class FakeAdapter:
    """In-memory StorageAdapter that records every probe."""

    def __init__(
        self,
        billing_project: str,
        options: ClientOptions | None,
        requester_pays_buckets: set[str],
        probe_error: Exception | None = None,
    ):
        self.billing_project = billing_project
        self.options = options
        self._requester_pays_buckets = requester_pays_buckets
        self._probe_error = probe_error
        self.probes: list[str] = []
        self.closed = False

    def requester_pays(self, bucket: str) -> bool:
        self.probes.append(bucket)
        if self._probe_error is not None:
            raise self._probe_error
        return bucket in self._requester_pays_buckets

    def list_buckets(self, prefix: str | None = None) -> list[str]:
        names = sorted({"alpha", "beta", "bravo"} | self._requester_pays_buckets)
        return [n for n in names if prefix is None or n.startswith(prefix)]

    def close(self) -> None:
        self.closed = True


class RecordingFactory:
    """Adapter factory that counts constructions."""

    def __init__(self, requester_pays_buckets=(), delay: float = 0.0):
        self.requester_pays_buckets = set(requester_pays_buckets)
        self.delay = delay
        self.calls: list[tuple[str, ClientOptions | None]] = []
        self.adapters: list[FakeAdapter] = []
        self.fail_with: Exception | None = None
        self.probe_error: Exception | None = None
        self._lock = threading.Lock()

    def __call__(self, billing_project, options):
        with self._lock:
            self.calls.append((billing_project, options))
        if self.delay:
            time.sleep(self.delay)
        if self.fail_with is not None:
            raise self.fail_with
        adapter = FakeAdapter(
            billing_project,
            options,
            self.requester_pays_buckets,
            probe_error=self.probe_error,
        )
        with self._lock:
            self.adapters.append(adapter)
        return adapter

    @property
    def probes(self) -> list[str]:
        return [bucket for adapter in self.adapters for bucket in adapter.probes]


@pytest.fixture
def factory():
    return RecordingFactory(requester_pays_buckets={"rp-bucket"})


@pytest.fixture
def cache(factory):
    return ProviderCache(factory)


@pytest.fixture(autouse=True)
def reset_default_configuration():
    yield
    set_default_configuration(None)


@pytest.fixture
def make_adapter():
    def make(billing_project="", options=None, requester_pays_buckets=()):
        return FakeAdapter(billing_project, options, set(requester_pays_buckets))

    return make


@pytest.fixture
def slow_factory():
    return RecordingFactory(delay=0.05)
