"""ResourceStore backed by the Kubernetes API. Reads secrets, config maps and bindings; writes EsIndex only."""

from typing import Any

from kubernetes import client
from kubernetes.client.exceptions import ApiException
from pydantic import ValidationError

from esindex_operator.config.storage.kubernetes import get_kubernetes_config
from esindex_operator.controllers.schema.binding import Binding
from esindex_operator.controllers.schema.core import ConfigMap, Secret
from esindex_operator.controllers.schema.esindex import EsIndex
from esindex_operator.repositories.kubernetes.base import (
    RepositoryError,
    _translate_api_error,
    _translate_validation_error,
)
from esindex_operator.resources.kubernetes.client import get_core_api, get_custom_objects_api


class KubernetesResourceStore:
    """Typed get/update over CoreV1Api and CustomObjectsApi."""

    def __init__(
        self,
        core_api: client.CoreV1Api | None = None,
        custom_objects_api: client.CustomObjectsApi | None = None,
        coordinates: dict[str, dict[str, str]] | None = None,
    ):
        self._core = core_api or get_core_api()
        self._custom = custom_objects_api or get_custom_objects_api()
        coords = coordinates or get_kubernetes_config()
        self._esindex = coords["esindex"]
        self._binding = coords["binding"]

    def get_esindex(self, namespace: str, name: str) -> EsIndex:
        obj = self._get_custom_object(self._esindex, "EsIndex", namespace, name)
        try:
            return EsIndex.model_validate(obj)
        except ValidationError as e:
            raise _translate_validation_error(e, "EsIndex", namespace, name) from e

    def update_esindex(self, esindex: EsIndex) -> None:
        meta = esindex.metadata
        body = {
            "metadata": {
                "finalizers": list(meta.finalizers),
                "ownerReferences": [
                    ref.model_dump(by_alias=True, exclude_none=True) for ref in meta.owner_references
                ],
            }
        }
        try:
            self._custom.patch_namespaced_custom_object(
                group=self._esindex["group"],
                version=self._esindex["version"],
                namespace=meta.namespace,
                plural=self._esindex["plural"],
                name=meta.name,
                body=body,
            )
        except ApiException as e:
            raise _translate_api_error(e, "EsIndex", meta.namespace, meta.name) from e

    def update_esindex_status(self, esindex: EsIndex) -> None:
        meta = esindex.metadata
        body = {"status": esindex.status.model_dump(by_alias=True)}
        try:
            self._custom.patch_namespaced_custom_object_status(
                group=self._esindex["group"],
                version=self._esindex["version"],
                namespace=meta.namespace,
                plural=self._esindex["plural"],
                name=meta.name,
                body=body,
            )
        except ApiException as e:
            raise _translate_api_error(e, "EsIndex", meta.namespace, meta.name) from e

    def get_binding(self, namespace: str, name: str) -> Binding:
        obj = self._get_custom_object(self._binding, "Binding", namespace, name)
        try:
            return Binding.model_validate(obj)
        except ValidationError as e:
            raise _translate_validation_error(e, "Binding", namespace, name) from e

    def get_secret(self, namespace: str, name: str) -> Secret:
        try:
            secret = self._core.read_namespaced_secret(name, namespace)
        except ApiException as e:
            raise _translate_api_error(e, "Secret", namespace, name) from e
        return Secret(name=name, data=secret.data or {})

    def get_config_map(self, namespace: str, name: str) -> ConfigMap:
        try:
            config_map = self._core.read_namespaced_config_map(name, namespace)
        except ApiException as e:
            raise _translate_api_error(e, "ConfigMap", namespace, name) from e
        return ConfigMap(name=name, data=config_map.data or {})

    def _get_custom_object(self, coords: dict[str, str], kind: str, namespace: str, name: str) -> dict[str, Any]:
        try:
            obj = self._custom.get_namespaced_custom_object(
                group=coords["group"],
                version=coords["version"],
                namespace=namespace,
                plural=coords["plural"],
                name=name,
            )
        except ApiException as e:
            raise _translate_api_error(e, kind, namespace, name) from e
        if not isinstance(obj, dict):
            raise RepositoryError(f"unexpected response reading {kind} {namespace}/{name}")
        return obj
