from google.api_core.exceptions import BadRequest, GoogleAPIError, NotFound
from google.auth.credentials import AnonymousCredentials
from google.cloud import storage

from .configuration import ClientOptions
from .errors import ResolutionError
from .storage_protocols import StorageAdapter


class GCSAdapter(StorageAdapter):
    """Google Cloud Storage adapter for BucketFileSystem."""

    def __init__(
        self,
        client: storage.Client,
        billing_project: str = "",
        options: ClientOptions | None = None,
    ):
        """
        Create an adapter from an existing storage Client.
        This allows custom authentication and configuration.
        """
        self._client = client
        self._billing_project = billing_project or ""
        self._options = options

    @classmethod
    def create(
        cls, billing_project: str, options: ClientOptions | None = None
    ) -> "GCSAdapter":
        """
        Build a client from `options` (default credentials when None)
        and wrap it. Requests are billed to `billing_project` when set.
        """
        return cls(_build_client(options), billing_project, options)

    @property
    def client(self) -> storage.Client:
        return self._client

    @property
    def billing_project(self) -> str:
        return self._billing_project

    @property
    def options(self) -> ClientOptions | None:
        return self._options

    def bucket(self, bucket_name: str) -> storage.Bucket:
        """Bucket reference that bills requests to the adapter's project."""
        return self._client.bucket(
            bucket_name, user_project=self._billing_project or None
        )

    def requester_pays(self, bucket: str) -> bool:
        try:
            return bool(self._client.get_bucket(bucket).requester_pays)
        except BadRequest as e:
            # GCS refuses metadata reads on requester-pays buckets that
            # name no user project; that refusal is itself the answer.
            if _is_user_project_missing(e):
                return True
            raise ResolutionError(
                f"Unable to determine requester-pays status of bucket '{bucket}'"
            ) from e
        except NotFound as e:
            raise ResolutionError(f"Bucket '{bucket}' not found") from e
        except GoogleAPIError as e:
            raise ResolutionError(
                f"Unable to determine requester-pays status of bucket '{bucket}'"
            ) from e

    def list_buckets(self, prefix: str | None = None) -> list[str]:
        try:
            return [b.name for b in self._client.list_buckets(prefix=prefix)]
        except GoogleAPIError as e:
            raise ResolutionError("Unable to list buckets") from e

    def close(self) -> None:
        self._client.close()

    def __repr__(self) -> str:
        return (
            f"GCSAdapter(billing_project={self._billing_project!r}, "
            f"options={self._options!r})"
        )


def _build_client(options: ClientOptions | None) -> storage.Client:
    if options is None:
        return storage.Client()

    client_options = (
        {"api_endpoint": options.api_endpoint} if options.api_endpoint else None
    )
    if options.anonymous:
        return storage.Client(
            project=options.project or "<none>",
            credentials=AnonymousCredentials(),
            client_options=client_options,
        )
    if options.credentials_file:
        return storage.Client.from_service_account_json(
            options.credentials_file,
            project=options.project,
            client_options=client_options,
        )
    return storage.Client(project=options.project, client_options=client_options)


def _is_user_project_missing(error: BadRequest) -> bool:
    for detail in error.errors or []:
        if isinstance(detail, dict) and detail.get("reason") == "userProjectMissing":
            return True
    return "requester pays" in (error.message or "").lower()
