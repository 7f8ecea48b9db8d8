"""GCP Secret Manager implementation of the secrets service."""
import os
import logging
from typing import Any, Dict, List, Optional
from google.cloud import secretmanager
from .config_loader import load_config, ConfigError, ConfigNotFoundError
from .models import CallContext, Secret

logger = logging.getLogger(__name__)

DESCRIPTION_ANNOTATION = "description"

# Lazy loading: the config file is only read once a remote call needs it,
# so --help, version and config commands run without one.
_CONFIG: Optional[Dict[str, Any]] = None
_CONFIG_LOADED = False


def _get_config() -> Dict[str, Any]:
    """
    Load configuration on first use.

    Returns:
        Configuration dictionary

    Raises:
        ConfigError: If config file is missing or invalid
    """
    global _CONFIG, _CONFIG_LOADED

    if not _CONFIG_LOADED:
        _CONFIG = load_config()
        _CONFIG_LOADED = True

        auth = _CONFIG['authentication']
        if auth['type'] == 'service_account':
            os.environ['GOOGLE_APPLICATION_CREDENTIALS'] = auth['service_account_path']
            logger.info(f"Set GOOGLE_APPLICATION_CREDENTIALS from config: {auth['service_account_path']}")

    return _CONFIG


def resolve_project_id(explicit: Optional[str] = None) -> str:
    """
    Resolve the GCP project every call is made against.

    Priority order:
    1. Explicit value (--project-id)
    2. GCP_PROJECT environment variable
    3. gcp.project_id in the config file

    Raises:
        ConfigError: If no source provides a project ID
    """
    if explicit:
        return explicit

    gcp_project_env = os.getenv("GCP_PROJECT")
    if gcp_project_env:
        logger.debug(f"Using GCP_PROJECT from environment: {gcp_project_env}")
        return gcp_project_env

    project_id = _get_config()['gcp']['project_id']
    if not project_id:
        raise ConfigError(
            "Project ID not found. Pass --project-id, set the GCP_PROJECT environment "
            "variable or configure gcp.project_id in the config file"
        )
    logger.debug(f"Using project_id from config: {project_id}")
    return str(project_id)


def resolve_timeout(explicit: Optional[float] = None) -> Optional[float]:
    """
    Request timeout: explicit value, else gcp.timeout from the config file.

    The config file is read even when the project came from --project-id
    or GCP_PROJECT. Having no config file at all means no timeout.

    Raises:
        ConfigError: If a config file exists but is invalid
    """
    if explicit:
        return explicit
    try:
        config = _get_config()
    except ConfigNotFoundError:
        logger.debug("No config file, calls run without a timeout")
        return None
    return config['gcp'].get('timeout')


def _short_name(resource_name: str) -> str:
    return resource_name.rsplit("/", 1)[-1]


def _to_secret(resource) -> Secret:
    annotations = resource.annotations or {}
    return Secret(
        id=resource.name,
        name=_short_name(resource.name),
        labels=dict(resource.labels or {}),
        description=annotations.get(DESCRIPTION_ANNOTATION, ""),
    )


class GCPSecretsService:
    """Secrets service backed by GCP Secret Manager."""

    def __init__(self, client: Optional[secretmanager.SecretManagerServiceClient] = None):
        self._client = client

    @property
    def client(self) -> secretmanager.SecretManagerServiceClient:
        """Lazy-initialize client."""
        if self._client is None:
            self._client = secretmanager.SecretManagerServiceClient()
        return self._client

    @staticmethod
    def _call_options(ctx: CallContext) -> Dict[str, Any]:
        if ctx.timeout:
            return {"timeout": ctx.timeout}
        return {}

    @staticmethod
    def _project_path(ctx: CallContext) -> str:
        if not ctx.project_id:
            raise ConfigError("No GCP project bound to this call")
        return f"projects/{ctx.project_id}"

    def _secret_path(self, ctx: CallContext, name: str) -> str:
        """Accept either a short secret name or a full resource name."""
        if name.startswith("projects/"):
            return name
        return f"{self._project_path(ctx)}/secrets/{name}"

    def create_secret(self, ctx: CallContext, secret: Secret) -> str:
        """
        Create the secret and store its credentials as the first version.

        Returns:
            Resource name of the new secret
        """
        created = self.client.create_secret(
            request={
                "parent": self._project_path(ctx),
                "secret_id": secret.name,
                "secret": {
                    "replication": {"automatic": {}},
                    "labels": dict(secret.labels),
                    "annotations": {DESCRIPTION_ANNOTATION: secret.description},
                },
            },
            **self._call_options(ctx),
        )
        logger.info(f"Created secret {created.name}")

        self.client.add_secret_version(
            request={
                "parent": created.name,
                "payload": {"data": secret.credentials_json().encode("UTF-8")},
            },
            **self._call_options(ctx),
        )
        logger.debug(f"Stored credentials version for {created.name}")
        return created.name

    def inspect_secret(self, ctx: CallContext, secret_id: str) -> Secret:
        resource = self.client.get_secret(
            request={"name": self._secret_path(ctx, secret_id)},
            **self._call_options(ctx),
        )
        return _to_secret(resource)

    def list_secrets(self, ctx: CallContext) -> List[Secret]:
        pager = self.client.list_secrets(
            request={"parent": self._project_path(ctx)},
            **self._call_options(ctx),
        )
        return [_to_secret(resource) for resource in pager]

    def delete_secret(self, ctx: CallContext, name: str, recover: bool) -> None:
        """
        Delete a secret.

        With recover=False the secret and all its versions are removed for
        good. With recover=True every enabled version is disabled instead;
        re-enabling a version restores access.
        """
        path = self._secret_path(ctx, name)
        if not recover:
            self.client.delete_secret(request={"name": path}, **self._call_options(ctx))
            logger.info(f"Deleted secret {path}")
            return

        versions = self.client.list_secret_versions(
            request={"parent": path, "filter": "state:ENABLED"},
            **self._call_options(ctx),
        )
        for version in versions:
            self.client.disable_secret_version(
                request={"name": version.name},
                **self._call_options(ctx),
            )
            logger.info(f"Disabled secret version {version.name}")
