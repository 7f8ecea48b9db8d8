"""Client entry point handed to CLI commands."""
import logging
from typing import List, Optional, Protocol

from ..domains.models import CallContext, Secret
from ..domains.gcp_client import GCPSecretsService, resolve_project_id, resolve_timeout

logger = logging.getLogger(__name__)


class SecretsService(Protocol):
    """Operations every secrets backend provides. Errors are raised, never returned."""

    def create_secret(self, ctx: CallContext, secret: Secret) -> str: ...

    def inspect_secret(self, ctx: CallContext, secret_id: str) -> Secret: ...

    def list_secrets(self, ctx: CallContext) -> List[Secret]: ...

    def delete_secret(self, ctx: CallContext, name: str, recover: bool) -> None: ...


class Client:
    """Backend services bound to one invocation's call context."""

    def __init__(self, ctx: CallContext, secrets_service: SecretsService):
        self.ctx = ctx
        self._secrets_service = secrets_service

    def secrets_service(self) -> SecretsService:
        return self._secrets_service


def new_client(ctx: Optional[CallContext] = None) -> Client:
    """
    Build a client for the current invocation.

    Resolves the project and timeout left unset in ctx (environment, then
    config file) and binds them to the returned client.

    Raises:
        ConfigError: If no GCP project can be resolved
    """
    ctx = ctx or CallContext()
    bound = CallContext(
        project_id=resolve_project_id(ctx.project_id),
        timeout=resolve_timeout(ctx.timeout),
    )
    logger.debug(f"Client bound to project {bound.project_id} (timeout={bound.timeout})")
    return Client(bound, GCPSecretsService())
