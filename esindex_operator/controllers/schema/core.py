"""Kubernetes object metadata and core resources (Secret, ConfigMap) as read by the operator."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Parses the Kubernetes wire form (camelCase) and accepts snake_case names in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class OwnerReference(CamelModel):
    """One entry of metadata.ownerReferences."""

    api_version: str = ""
    kind: str = ""
    name: str = ""
    uid: str = ""
    controller: bool | None = None
    block_owner_deletion: bool | None = None


class ObjectMeta(CamelModel):
    """Subset of metadata the operator reads or writes."""

    name: str
    namespace: str = "default"
    uid: str = ""
    generation: int = 0
    resource_version: str | None = None
    deletion_timestamp: str | None = None
    finalizers: list[str] = Field(default_factory=list)
    owner_references: list[OwnerReference] = Field(default_factory=list)


class Secret(BaseModel):
    """Secret data: key -> base64-encoded value."""

    name: str
    data: dict[str, str] = Field(default_factory=dict)


class ConfigMap(BaseModel):
    """Config map data: key -> plain value."""

    name: str
    data: dict[str, str] = Field(default_factory=dict)
