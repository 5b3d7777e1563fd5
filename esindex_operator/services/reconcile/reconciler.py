"""
One reconcile pass for an EsIndex: resolve credentials, create/adopt or delete the remote index,
link ownership to the binding's owner, and record the outcome in status.

State machine (status.state):
    "" -> Pending -> Online | Failed
    Online -> Failed
    Online | Failed -> (deleted)

The engine is the system of record: an Online status is re-checked against it on every pass.
Apart from the first Pending record, status is written once, at the end of a pass.
Errors never escape `reconcile`; they come back in ReconcileResult with `requeue`
telling the framework whether a retry can help.
"""

import logging
from typing import NamedTuple

from esindex_operator.config.logging import get_logger
from esindex_operator.config.settings import get_settings
from esindex_operator.controllers.schema.esindex import EsIndex, ResourceState
from esindex_operator.repositories.kubernetes.base import NotFoundError, RepositoryError, ResourceStore
from esindex_operator.resources.opensearch.index_manager import (
    EngineUnreachableError,
    IndexRequestError,
    RemoteIndexClient,
    remote_delete_skipped,
)
from esindex_operator.services.credentials.errors import CredentialError
from esindex_operator.services.credentials.resolver import CredentialResolver
from esindex_operator.services.ownership.linker import OwnershipError, OwnershipLinker


class ReconcileResult(NamedTuple):
    """Outcome of a pass. `state` is the status.state left on the resource ("" if none)."""

    state: str
    requeue: bool = False
    error: Exception | None = None


class Reconciler:
    """Drives one EsIndex toward its spec. Safe to share across threads; holds no per-pass state."""

    def __init__(
        self,
        store: ResourceStore,
        resolver: CredentialResolver | None = None,
        index_client: RemoteIndexClient | None = None,
        linker: OwnershipLinker | None = None,
        finalizer_name: str | None = None,
        logger: logging.Logger | None = None,
    ):
        self._store = store
        self._resolver = resolver or CredentialResolver(store, logger=logger)
        self._index_client = index_client or RemoteIndexClient(logger=logger)
        self._linker = linker or OwnershipLinker(store, logger=logger)
        self._finalizer = finalizer_name or get_settings().finalizer_name
        self._logger = logger or get_logger(__name__)

    def reconcile(self, namespace: str, name: str) -> ReconcileResult:
        """Run one pass for the EsIndex `namespace/name`."""
        try:
            esindex = self._store.get_esindex(namespace, name)
        except NotFoundError:
            self._logger.debug("EsIndex no longer exists", extra={"namespace": namespace, "esindex": name})
            return ReconcileResult("")
        except RepositoryError as e:
            self._logger.warning("Failed to read EsIndex", extra={"namespace": namespace, "esindex": name})
            return ReconcileResult("", requeue=True, error=e)

        if esindex.being_deleted:
            return self._finalize(esindex)
        return self._ensure_present(esindex)

    def _ensure_present(self, esindex: EsIndex) -> ReconcileResult:
        meta, spec, status = esindex.metadata, esindex.spec, esindex.status
        log_ctx = {"namespace": meta.namespace, "esindex": meta.name, "index_name": spec.index_name}

        if self._finalizer not in meta.finalizers:
            meta.finalizers.append(self._finalizer)
            try:
                self._store.update_esindex(esindex)
            except RepositoryError as e:
                self._logger.warning("Failed to add finalizer", extra=log_ctx)
                return ReconcileResult(status.state, requeue=True, error=e)

        if not status.state:
            status.state = ResourceState.PENDING.value
            try:
                self._store.update_esindex_status(esindex)
            except RepositoryError as e:
                self._logger.warning("Failed to record Pending state", extra=log_ctx)
                return ReconcileResult(status.state, requeue=True, error=e)

        try:
            uri = self._resolver.resolve(meta.namespace, spec)
        except CredentialError as e:
            self._logger.warning(
                "Credential resolution failed",
                extra={**log_ctx, "error_kind": e.kind.value, "retryable": e.retryable},
            )
            return self._finish(esindex, ResourceState.FAILED, str(e), requeue=e.retryable, error=e)

        message, error = self._sync_remote(esindex, uri)

        binding_name = spec.binding_reference
        if binding_name and not meta.owner_references:
            self._link_owner(esindex, binding_name)

        if error is not None:
            return self._finish(esindex, ResourceState.FAILED, message, requeue=True, error=error)
        return self._finish(esindex, ResourceState.ONLINE, "")

    def _sync_remote(self, esindex: EsIndex, uri: str) -> tuple[str, Exception | None]:
        """Make the remote index match the EsIndex spec. Returns (failure message, error); ("", None) on success."""
        meta, spec, status = esindex.metadata, esindex.spec, esindex.status
        try:
            if status.state == ResourceState.ONLINE.value and status.observed_generation == meta.generation:
                current = self._index_client.get(uri, spec.index_name)
                if current.ok:
                    return "", None
                self._logger.warning(
                    "Online index not readable on engine; applying spec again",
                    extra={"namespace": meta.namespace, "esindex": meta.name, "status": current.status_code},
                )
            result = self._index_client.create_or_adopt(
                uri,
                spec.index_name,
                spec.number_of_shards,
                spec.number_of_replicas,
                spec.bind_only,
            )
        except EngineUnreachableError as e:
            return str(e), e
        if result.ok:
            return "", None
        operation = "bind" if spec.bind_only else "create"
        return result.body, IndexRequestError(operation, spec.index_name, result)

    def _link_owner(self, esindex: EsIndex, binding_name: str) -> None:
        """Best effort: failures are logged and never fail the pass."""
        meta = esindex.metadata
        try:
            self._linker.link(meta.namespace, binding_name, esindex)
        except OwnershipError as e:
            self._logger.warning(
                "Owner reference not set",
                extra={"namespace": meta.namespace, "esindex": meta.name, "binding": binding_name, "error": str(e)},
            )
            return
        try:
            self._store.update_esindex(esindex)
        except RepositoryError as e:
            self._logger.warning(
                "Failed to persist owner reference",
                extra={"namespace": meta.namespace, "esindex": meta.name, "error": str(e)},
            )

    def _finish(
        self,
        esindex: EsIndex,
        state: ResourceState,
        message: str,
        requeue: bool = False,
        error: Exception | None = None,
    ) -> ReconcileResult:
        meta, status = esindex.metadata, esindex.status
        status.state = state.value
        status.message = message
        status.observed_generation = meta.generation
        try:
            self._store.update_esindex_status(esindex)
        except RepositoryError as e:
            self._logger.warning("Failed to update status", extra={"namespace": meta.namespace, "esindex": meta.name})
            return ReconcileResult(state.value, requeue=True, error=e)

        log = self._logger.info if state == ResourceState.ONLINE else self._logger.warning
        log(
            "EsIndex reconciled",
            extra={
                "namespace": meta.namespace,
                "esindex": meta.name,
                "state": state.value,
                "generation": meta.generation,
                "requeue": requeue,
            },
        )
        return ReconcileResult(state.value, requeue=requeue, error=error)

    def _finalize(self, esindex: EsIndex) -> ReconcileResult:
        """Delete the remote index (unless skipped), then release the finalizer."""
        meta, spec, status = esindex.metadata, esindex.spec, esindex.status
        log_ctx = {"namespace": meta.namespace, "esindex": meta.name, "index_name": spec.index_name}
        if self._finalizer not in meta.finalizers:
            return ReconcileResult(status.state)

        uri = ""
        if not remote_delete_skipped(spec.bind_only, status.state):
            try:
                uri = self._resolver.resolve(meta.namespace, spec)
            except CredentialError as e:
                if e.retryable:
                    self._logger.warning(
                        "Cannot resolve credentials to delete index",
                        extra={**log_ctx, "error_kind": e.kind.value},
                    )
                    return ReconcileResult(status.state, requeue=True, error=e)
                # terminal kinds never resolve on retry
                self._logger.error(
                    "Remote index left behind: credentials unusable",
                    extra={**log_ctx, "error_kind": e.kind.value, "error": str(e)},
                )
                return self._release_finalizer(esindex)

        error = self._delete_remote(esindex, uri)
        if error is not None:
            return ReconcileResult(status.state, requeue=True, error=error)
        return self._release_finalizer(esindex)

    def _delete_remote(self, esindex: EsIndex, uri: str) -> Exception | None:
        """Returns the error that should keep the finalizer, or None once the index is gone."""
        meta, spec, status = esindex.metadata, esindex.spec, esindex.status
        try:
            result = self._index_client.delete(uri, spec.index_name, bind_only=spec.bind_only, last_state=status.state)
        except EngineUnreachableError as e:
            return e
        if not result.ok and result.status_code != 404:
            self._logger.warning(
                "Remote index deletion rejected",
                extra={"namespace": meta.namespace, "esindex": meta.name, "status": result.status_code},
            )
            return IndexRequestError("delete", spec.index_name, result)
        return None

    def _release_finalizer(self, esindex: EsIndex) -> ReconcileResult:
        meta, status = esindex.metadata, esindex.status
        log_ctx = {"namespace": meta.namespace, "esindex": meta.name, "index_name": esindex.spec.index_name}

        meta.finalizers = [f for f in meta.finalizers if f != self._finalizer]
        try:
            self._store.update_esindex(esindex)
        except RepositoryError as e:
            self._logger.warning("Failed to remove finalizer", extra=log_ctx)
            return ReconcileResult(status.state, requeue=True, error=e)
        self._logger.info("EsIndex finalized", extra=log_ctx)
        return ReconcileResult(status.state)

