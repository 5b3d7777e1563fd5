"""Resource store contract and common Kubernetes API error handling."""

from typing import Protocol

from kubernetes.client.exceptions import ApiException
from pydantic import ValidationError

from esindex_operator.config.logging import get_logger
from esindex_operator.controllers.schema.binding import Binding
from esindex_operator.controllers.schema.core import ConfigMap, Secret
from esindex_operator.controllers.schema.esindex import EsIndex

logger = get_logger(__name__)


class RepositoryError(Exception):
    """Raised when a store operation fails after handling Kubernetes API errors."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause


class NotFoundError(RepositoryError):
    """The requested object does not exist."""

    def __init__(self, kind: str, namespace: str, name: str, cause: Exception | None = None):
        super().__init__(f"{kind} {namespace}/{name} not found", cause=cause)
        self.kind = kind
        self.namespace = namespace
        self.name = name


def _translate_api_error(e: ApiException, kind: str, namespace: str, name: str) -> RepositoryError:
    """Wrap ApiException into NotFoundError (404) or a RepositoryError naming the failed lookup."""
    if e.status == 404:
        return NotFoundError(kind, namespace, name, cause=e)
    logger.warning(
        "Kubernetes API call failed",
        extra={"kind": kind, "namespace": namespace, "object_name": name, "status": e.status},
    )
    return RepositoryError(f"failed to access {kind} {namespace}/{name}: {e.status} {e.reason}", cause=e)


def _translate_validation_error(e: ValidationError, kind: str, namespace: str, name: str) -> RepositoryError:
    """A stored object that does not match the schema is reported like any other unreadable object."""
    logger.warning(
        "Stored object does not match schema",
        extra={"kind": kind, "namespace": namespace, "object_name": name, "error_count": e.error_count()},
    )
    return RepositoryError(f"malformed {kind} {namespace}/{name}: {e}", cause=e)


class ResourceStore(Protocol):
    """Typed access to the resources the reconciler reads and the EsIndex it writes."""

    def get_esindex(self, namespace: str, name: str) -> EsIndex: ...

    def update_esindex(self, esindex: EsIndex) -> None:
        """Persist metadata.finalizers and metadata.ownerReferences."""
        ...

    def update_esindex_status(self, esindex: EsIndex) -> None:
        """Persist status through the status subresource."""
        ...

    def get_binding(self, namespace: str, name: str) -> Binding: ...

    def get_secret(self, namespace: str, name: str) -> Secret: ...

    def get_config_map(self, namespace: str, name: str) -> ConfigMap: ...
