"""Environment-based operator settings. Read-only; no business logic."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Operator settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="esindex-operator", description="Operator name")
    log_level: str = Field(default="INFO", description="Log level name")

    # Search engine (see config/storage/opensearch for connection semantics)
    engine_request_timeout: int = Field(default=300, ge=1, description="Per-request timeout (seconds)")
    engine_verify_certs: bool = Field(default=False, description="Verify the engine's TLS certificate")

    # Managed resource coordinates
    esindex_group: str = Field(default="ibmcloud.ibm.com", description="EsIndex API group")
    esindex_version: str = Field(default="v1alpha1", description="EsIndex API version")
    esindex_plural: str = Field(default="esindices", description="EsIndex plural name")

    # Binding resource coordinates
    binding_group: str = Field(default="ibmcloud.ibm.com", description="Binding API group")
    binding_version: str = Field(default="v1alpha1", description="Binding API version")
    binding_plural: str = Field(default="bindings", description="Binding plural name")

    finalizer_name: str = Field(default="esindex.ibmcloud.ibm.com", description="Finalizer guarding remote deletion")

    # Framework
    requeue_delay_seconds: int = Field(default=60, ge=1, description="Delay before a retryable pass is re-run")
    max_workers: int = Field(default=4, ge=1, le=64, description="Concurrent reconcile workers")


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance. Use for process lifetime."""
    return Settings()
