"""
Create, read and delete a named index on the search engine given a resolved connection URI.
Returns the engine's raw status code and body so callers can classify the outcome;
transport failures are raised separately as EngineUnreachableError.
"""

import json
import logging
from typing import Any, Callable, NamedTuple

from opensearchpy import OpenSearch
from opensearchpy.exceptions import ConnectionError as OSConnectionError
from opensearchpy.exceptions import ImproperlyConfigured, OpenSearchException, TransportError

from esindex_operator.config.logging import get_logger
from esindex_operator.controllers.schema.esindex import ResourceState
from esindex_operator.resources.opensearch.client import get_engine_client
from esindex_operator.utils.uri import redact_uri


class IndexResult(NamedTuple):
    """Outcome of one remote call."""

    status_code: int
    body: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class EngineUnreachableError(Exception):
    """The engine could not be reached (connection refused, timeout, DNS, TLS)."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause


class IndexRequestError(Exception):
    """The engine answered with a non-2xx status."""

    def __init__(self, operation: str, index_name: str, result: IndexResult):
        super().__init__(f"{operation} index {index_name} failed with status {result.status_code}: {result.body}")
        self.operation = operation
        self.index_name = index_name
        self.result = result


def build_index_body(number_of_shards: int, number_of_replicas: int) -> dict[str, Any]:
    """Settings payload for index creation."""
    return {
        "settings": {
            "number_of_shards": number_of_shards,
            "number_of_replicas": number_of_replicas,
        }
    }


def remote_delete_skipped(bind_only: bool, last_state: str) -> bool:
    """
    A bind-only index was never owned, and a resource that ended Failed is assumed
    to have nothing on the engine to undo.
    """
    return bind_only or last_state == ResourceState.FAILED.value


def _error_body(e: TransportError) -> str:
    info = e.info
    if isinstance(info, (dict, list)):
        return json.dumps(info)
    if info:
        return str(info)
    return str(e.error)


class RemoteIndexClient:
    """Idempotent index operations over <uri>/<index_name>."""

    def __init__(
        self,
        client_factory: Callable[[str], OpenSearch] = get_engine_client,
        logger: logging.Logger | None = None,
    ):
        self._client_factory = client_factory
        self._logger = logger or get_logger(__name__)

    def create_or_adopt(
        self,
        uri: str,
        index_name: str,
        number_of_shards: int,
        number_of_replicas: int,
        bind_only: bool,
    ) -> IndexResult:
        """Create the index; in bind-only mode only check that it exists."""
        if bind_only:
            return self.get(uri, index_name)
        body = build_index_body(number_of_shards, number_of_replicas)
        return self._call(
            "create",
            uri,
            index_name,
            lambda client: client.indices.create(index=index_name, body=body),
        )

    def get(self, uri: str, index_name: str) -> IndexResult:
        """Read the index; a 404 result means it does not exist."""
        return self._call("get", uri, index_name, lambda client: client.indices.get(index=index_name))

    def delete(self, uri: str, index_name: str, *, bind_only: bool = False, last_state: str = "") -> IndexResult:
        """Remove the index unless remote deletion is skipped for this resource."""
        if remote_delete_skipped(bind_only, last_state):
            self._logger.info(
                "Remote index left in place on deletion",
                extra={"index_name": index_name, "bind_only": bind_only, "last_state": last_state},
            )
            return IndexResult(200, "")
        return self._call("delete", uri, index_name, lambda client: client.indices.delete(index=index_name))

    def _call(self, operation: str, uri: str, index_name: str, request: Callable[[OpenSearch], Any]) -> IndexResult:
        host = redact_uri(uri)
        try:
            response = request(self._client_factory(uri))
        except OSConnectionError as e:
            # ConnectionError subclasses TransportError; it carries no HTTP status
            self._logger.warning(
                "Search engine unreachable",
                extra={"operation": operation, "index_name": index_name, "host": host, "error_type": type(e).__name__},
            )
            raise EngineUnreachableError(f"search engine at {host} unreachable: {e.error}", cause=e) from e
        except TransportError as e:
            status = e.status_code if isinstance(e.status_code, int) else 500
            self._logger.info(
                "Search engine rejected request",
                extra={"operation": operation, "index_name": index_name, "host": host, "status": status},
            )
            return IndexResult(status, _error_body(e))
        except (ImproperlyConfigured, OpenSearchException, ValueError) as e:
            raise EngineUnreachableError(f"search engine at {host} unusable: {e}", cause=e) from e

        self._logger.info(
            "Search engine request succeeded",
            extra={"operation": operation, "index_name": index_name, "host": host},
        )
        return IndexResult(200, json.dumps(response) if response is not None else "")
