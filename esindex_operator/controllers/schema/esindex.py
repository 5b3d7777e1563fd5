"""EsIndex custom resource schema: desired spec, observed status, and credential sources."""

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from esindex_operator.controllers.schema.core import CamelModel, ObjectMeta


class ResourceState(str, Enum):
    """Lifecycle state recorded in status.state."""

    PENDING = "Pending"
    ONLINE = "Online"
    FAILED = "Failed"


class FromSecret(BaseModel):
    """Connection URI stored base64-encoded under `key` of a secret."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["secret"] = "secret"
    secret_name: str
    key: str


class FromConfig(BaseModel):
    """Connection URI stored as plain text under `key` of a config map."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["config"] = "config"
    config_name: str
    key: str


class Empty(BaseModel):
    """No credential source declared."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["empty"] = "empty"


CredentialSource = Annotated[Union[FromSecret, FromConfig, Empty], Field(discriminator="kind")]


class KeySelector(CamelModel):
    """Selects a key of a secret or config map in the resource's namespace."""

    name: str = ""
    key: str = ""


class CredSelectors(CamelModel):
    """Wire form of esURIComposed: at most one selector may be set."""

    config_map_key_ref: KeySelector | None = None
    secret_key_ref: KeySelector | None = None


class BindingSource(CamelModel):
    """Name of a Binding whose secret holds the engine connection."""

    name: str = ""


class EsIndexSpec(CamelModel):
    """Desired state of an EsIndex."""

    index_name: str = Field(..., description="Index to create or bind on the engine")
    binding_from: BindingSource | None = None
    es_uri_composed: CredSelectors = Field(default_factory=CredSelectors, alias="esURIComposed")
    bind_only: bool = Field(default=False, description="Verify an existing index instead of creating it")
    number_of_shards: int = 1
    number_of_replicas: int = 1

    @property
    def binding_reference(self) -> str | None:
        """Trimmed binding name, or None when credentials are not taken from a binding."""
        if self.binding_from is None:
            return None
        return self.binding_from.name.strip() or None

    def credential_source(self) -> CredentialSource:
        """
        Collapse esURIComposed into a single credential source.
        Raises ValueError when both a secret and a config map key are selected.
        """
        secret_ref = self.es_uri_composed.secret_key_ref
        config_ref = self.es_uri_composed.config_map_key_ref
        if secret_ref is not None and config_ref is not None:
            raise ValueError("esURIComposed selects both secretKeyRef and configMapKeyRef; select one of them")
        if secret_ref is not None:
            return FromSecret(secret_name=secret_ref.name, key=secret_ref.key)
        if config_ref is not None:
            return FromConfig(config_name=config_ref.name, key=config_ref.key)
        return Empty()


class EsIndexStatus(CamelModel):
    """Observed state; written only by the reconciler."""

    state: str = ""
    message: str = ""
    observed_generation: int = Field(default=0, alias="generation")


class EsIndex(CamelModel):
    """The managed EsIndex resource."""

    api_version: str = ""
    kind: str = "EsIndex"
    metadata: ObjectMeta
    spec: EsIndexSpec
    status: EsIndexStatus = Field(default_factory=EsIndexStatus)

    @property
    def being_deleted(self) -> bool:
        return self.metadata.deletion_timestamp is not None
