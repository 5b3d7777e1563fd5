"""kopf handlers for EsIndex: every create/update/resume/delete event runs one reconcile pass."""

from typing import Any

import kopf

from esindex_operator.config.settings import get_settings
from esindex_operator.repositories.kubernetes.store import KubernetesResourceStore
from esindex_operator.services.reconcile.reconciler import ReconcileResult, Reconciler

_settings = get_settings()
_resource = (_settings.esindex_group, _settings.esindex_version, _settings.esindex_plural)

_reconciler: Reconciler | None = None


def get_reconciler() -> Reconciler:
    """Return the shared reconciler. Creates it, with a Kubernetes-backed store, on first use."""
    global _reconciler
    if _reconciler is None:
        _reconciler = Reconciler(KubernetesResourceStore())
    return _reconciler


def raise_for_result(result: ReconcileResult) -> None:
    """
    Translate a failed pass into kopf's retry semantics: retryable failures are re-run after
    requeue_delay_seconds; terminal ones wait for the next spec change.
    """
    if result.error is None:
        return
    if result.requeue:
        raise kopf.TemporaryError(str(result.error), delay=get_settings().requeue_delay_seconds)
    raise kopf.PermanentError(str(result.error))


@kopf.on.create(*_resource)
@kopf.on.update(*_resource)
@kopf.on.resume(*_resource)
def reconcile_esindex(name: str, namespace: str, **_: Any) -> None:
    """Drive the remote index toward the EsIndex spec."""
    raise_for_result(get_reconciler().reconcile(namespace, name))


@kopf.on.delete(*_resource)
def finalize_esindex(name: str, namespace: str, **_: Any) -> None:
    """Delete the remote index (unless bind-only or Failed) and release the finalizer."""
    raise_for_result(get_reconciler().reconcile(namespace, name))
