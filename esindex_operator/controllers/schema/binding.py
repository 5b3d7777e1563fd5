"""Binding resource schema and the connection blob stored in its secret."""

from pydantic import BaseModel, Field

from esindex_operator.controllers.schema.core import CamelModel, ObjectMeta

# Secret key holding base64(JSON) of EsConnection
CONNECTION_KEY = "connection"


class BindingSpec(CamelModel):
    """Only the secret name matters here; an empty name means the secret is named after the binding."""

    secret_name: str = ""


class Binding(CamelModel):
    """Credentials of a provisioned service instance, owned by that instance."""

    api_version: str = ""
    kind: str = "Binding"
    metadata: ObjectMeta
    spec: BindingSpec = Field(default_factory=BindingSpec)


class EsHttps(BaseModel):
    composed: list[str] = Field(default_factory=list)


class EsConnection(BaseModel):
    """Decoded `connection` blob: {"https": {"composed": [uri, ...]}}."""

    https: EsHttps = Field(default_factory=EsHttps)
