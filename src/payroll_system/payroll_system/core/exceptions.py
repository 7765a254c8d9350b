class DomainError(Exception):
    """Base exception for business rule violations."""

    code = "DOMAIN_ERROR"


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "VALIDATION_ERROR"


class ConfigurationError(DomainError):
    """Raised when a compensation configuration is internally inconsistent."""

    code = "CONFIGURATION_ERROR"


class StateError(DomainError):
    """Raised when a salary's status forbids the requested operation."""

    code = "STATE_ERROR"


class NotFoundError(DomainError):
    """Raised when a referenced salary, staff member or ledger entry is missing."""

    code = "NOT_FOUND"


class ReconciliationMismatch(DomainError):
    """Raised when breakdown lines do not add up to the parent salary."""

    code = "RECONCILIATION_MISMATCH"
