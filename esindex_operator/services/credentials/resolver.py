"""
Resolve the search engine connection URI of an EsIndex from exactly one credential source:
a Binding's secret (`connection` blob), a secret key (base64), or a config map key (plain).
Every pass resolves afresh; nothing is cached between passes.
"""

import base64
import binascii
import logging

from pydantic import ValidationError

from esindex_operator.config.logging import get_logger
from esindex_operator.controllers.schema.binding import CONNECTION_KEY, EsConnection
from esindex_operator.controllers.schema.core import ConfigMap, Secret
from esindex_operator.controllers.schema.esindex import Empty, EsIndexSpec, FromConfig, FromSecret
from esindex_operator.repositories.kubernetes.base import NotFoundError, RepositoryError, ResourceStore
from esindex_operator.services.credentials.errors import CredentialError, ErrorKind


def _decode_base64(value: str) -> str:
    return base64.b64decode(value, validate=True).decode("utf-8")


class CredentialResolver:
    """Turns an EsIndexSpec's credential declaration into a single connection URI."""

    def __init__(self, store: ResourceStore, logger: logging.Logger | None = None):
        self._store = store
        self._logger = logger or get_logger(__name__)

    def resolve(self, namespace: str, spec: EsIndexSpec) -> str:
        """
        Return the connection URI for `spec`, looking up objects in `namespace`.
        Raises CredentialError tagged with the failure kind.
        """
        try:
            source = spec.credential_source()
        except ValueError as e:
            raise CredentialError(str(e), ErrorKind.CONFLICTING_CREDENTIAL_SOURCE) from e

        binding_name = spec.binding_reference
        if binding_name and not isinstance(source, Empty):
            raise CredentialError(
                "both bindingFrom and esURIComposed are specified; must specify only one of them",
                ErrorKind.CONFLICTING_CREDENTIAL_SOURCE,
            )
        if binding_name:
            return self._from_binding(namespace, binding_name)
        if isinstance(source, FromSecret):
            return self._from_secret_key(namespace, source)
        if isinstance(source, FromConfig):
            return self._from_config_key(namespace, source)
        raise CredentialError(
            "neither bindingFrom nor esURIComposed is specified; must specify one of them",
            ErrorKind.MISSING_CREDENTIAL_SOURCE,
        )

    def _from_binding(self, namespace: str, binding_name: str) -> str:
        try:
            binding = self._store.get_binding(namespace, binding_name)
        except NotFoundError as e:
            self._logger.info("Binding not found", extra={"namespace": namespace, "binding": binding_name})
            raise CredentialError(f"binding {binding_name} not found", ErrorKind.BINDING_NOT_FOUND, cause=e) from e
        except RepositoryError as e:
            raise CredentialError(str(e), ErrorKind.LOOKUP_FAILED, cause=e) from e

        if not binding.metadata.owner_references:
            # Only ownership linking needs the owner; the secret may still be usable
            self._logger.info("Binding has no owner references", extra={"namespace": namespace, "binding": binding_name})

        secret_name = binding.spec.secret_name.strip() or binding_name
        secret = self._get_secret(namespace, secret_name)
        encoded = secret.data.get(CONNECTION_KEY)
        if not encoded:
            raise CredentialError(
                f"elastic search credentials not found in secret {secret_name}: missing key {CONNECTION_KEY!r}",
                ErrorKind.ES_URI_NOT_FOUND,
            )
        try:
            connection = EsConnection.model_validate_json(_decode_base64(encoded))
        except (binascii.Error, ValueError, ValidationError) as e:
            self._logger.warning(
                "Connection blob could not be decoded",
                extra={"namespace": namespace, "secret": secret_name, "error_type": type(e).__name__},
            )
            raise CredentialError(
                f"elastic search connection in secret {secret_name} could not be decoded",
                ErrorKind.ES_URI_NOT_FOUND,
                cause=e,
            ) from e

        composed = connection.https.composed
        if not composed or not composed[0]:
            raise CredentialError(
                f"elastic search composed uri not found in secret {secret_name}",
                ErrorKind.ES_URI_NOT_FOUND,
            )
        return composed[0]

    def _from_secret_key(self, namespace: str, source: FromSecret) -> str:
        secret_name = source.secret_name.strip()
        secret = self._get_secret(namespace, secret_name)
        encoded = secret.data.get(source.key)
        if encoded is None:
            self._logger.info(
                "Elastic search URI not found in secret",
                extra={"namespace": namespace, "secret": secret_name, "key": source.key},
            )
            raise CredentialError(
                f"elastic search credentials not found in secret {secret_name}: missing key {source.key!r}",
                ErrorKind.ES_URI_NOT_FOUND,
            )
        try:
            return _decode_base64(encoded)
        except (binascii.Error, ValueError) as e:
            raise CredentialError(
                f"value of key {source.key!r} in secret {secret_name} is not valid base64",
                ErrorKind.ES_URI_NOT_FOUND,
                cause=e,
            ) from e

    def _from_config_key(self, namespace: str, source: FromConfig) -> str:
        config_name = source.config_name.strip()
        config_map = self._get_config_map(namespace, config_name)
        value = config_map.data.get(source.key)
        if value is None:
            self._logger.info(
                "Key not found in config map",
                extra={"namespace": namespace, "config_map": config_name, "key": source.key},
            )
            raise CredentialError(
                f"elastic search credentials not found in configmap {config_name}: missing key {source.key!r}",
                ErrorKind.ES_URI_NOT_FOUND,
            )
        return value

    def _get_secret(self, namespace: str, name: str) -> Secret:
        try:
            return self._store.get_secret(namespace, name)
        except RepositoryError as e:
            self._logger.info("Secret lookup failed", extra={"namespace": namespace, "secret": name})
            raise CredentialError(str(e), ErrorKind.LOOKUP_FAILED, cause=e) from e

    def _get_config_map(self, namespace: str, name: str) -> ConfigMap:
        try:
            return self._store.get_config_map(namespace, name)
        except RepositoryError as e:
            self._logger.info("Config map lookup failed", extra={"namespace": namespace, "config_map": name})
            raise CredentialError(str(e), ErrorKind.LOOKUP_FAILED, cause=e) from e
