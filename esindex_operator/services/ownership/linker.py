"""Make an EsIndex a dependent of whatever owns its Binding, so deleting the owner cascades to the index."""

import logging

from esindex_operator.config.logging import get_logger
from esindex_operator.controllers.schema.core import OwnerReference
from esindex_operator.controllers.schema.esindex import EsIndex
from esindex_operator.repositories.kubernetes.base import RepositoryError, ResourceStore


class OwnershipError(Exception):
    """The binding or its owner reference could not be read."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause


class OwnershipLinker:
    """Copies a binding's first owner reference onto a target EsIndex."""

    def __init__(self, store: ResourceStore, logger: logging.Logger | None = None):
        self._store = store
        self._logger = logger or get_logger(__name__)

    def link(self, namespace: str, binding_name: str, target: EsIndex) -> OwnerReference:
        """
        Append the binding's first owner reference, marked as controller, to
        target.metadata.owner_references. Existing entries are kept.
        Not idempotent: callers link only while the target has no owner references.
        The target is modified in memory; persisting it is the caller's job.
        """
        name = binding_name.strip()
        try:
            binding = self._store.get_binding(namespace, name)
        except RepositoryError as e:
            raise OwnershipError(f"failed to get binding {name}: {e}", cause=e) from e
        if not binding.metadata.owner_references:
            raise OwnershipError(f"binding {name} has no owner references")

        owner = binding.metadata.owner_references[0]
        reference = OwnerReference(
            api_version=owner.api_version,
            kind=owner.kind,
            name=owner.name,
            uid=owner.uid,
            controller=True,
        )
        target.metadata.owner_references.append(reference)
        self._logger.info(
            "Owner reference added",
            extra={
                "namespace": namespace,
                "esindex": target.metadata.name,
                "owner_kind": reference.kind,
                "owner_name": reference.name,
            },
        )
        return reference
