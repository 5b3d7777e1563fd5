"""Credential resolution errors, tagged by kind so callers can tell terminal from transient failures."""

from enum import Enum


class ErrorKind(str, Enum):
    MISSING_CREDENTIAL_SOURCE = "MissingCredentialSource"
    CONFLICTING_CREDENTIAL_SOURCE = "ConflictingCredentialSource"
    BINDING_NOT_FOUND = "BindingNotFound"
    ES_URI_NOT_FOUND = "EsUriNotFound"
    LOOKUP_FAILED = "LookupFailed"


# Fixed only by editing the EsIndex spec (or the secret it points at)
TERMINAL_KINDS = frozenset(
    {
        ErrorKind.MISSING_CREDENTIAL_SOURCE,
        ErrorKind.CONFLICTING_CREDENTIAL_SOURCE,
        ErrorKind.ES_URI_NOT_FOUND,
    }
)


class CredentialError(Exception):
    """Raised when no connection URI could be resolved for an EsIndex."""

    def __init__(self, message: str, kind: ErrorKind, cause: Exception | None = None):
        super().__init__(message)
        self.kind = kind
        self.cause = cause

    @property
    def retryable(self) -> bool:
        return self.kind not in TERMINAL_KINDS
