# ecr_secret_operator/core/exceptions/base.py

"""
Base exception hierarchy for the ECR secret operator.

Errors are split by how the controller reacts to them: configuration errors
abort the process, credential-source and persistence errors are returned to
the work queue for a later retry.
"""

from typing import Any


class EcrSecretOperatorError(Exception):
    """
    Base exception class for all operator errors.

    Attributes:
        message: The error message describing what went wrong
        error_code: Optional error code for programmatic error handling
        details: Optional dictionary containing additional error details
        original_error: Optional reference to the original exception that caused this error
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.original_error = original_error

    def __str__(self) -> str:
        base_msg = self.message
        if self.error_code:
            base_msg += f" (Code: {self.error_code})"
        return base_msg

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for serialization.

        Returns:
            Dictionary representation of the exception
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "details": self.details,
            "original_error": str(self.original_error) if self.original_error else None,
        }


class ConfigurationError(EcrSecretOperatorError):
    """Raised for problems with the operator's own configuration."""

    pass


class FatalConfigurationError(ConfigurationError):
    """A configuration problem shared by every resource; the process must stop."""

    pass


class ValidationError(EcrSecretOperatorError):
    """A declared resource does not match its schema."""

    pass


class CredentialSourceError(EcrSecretOperatorError):
    """Configuring or calling the registry credential source failed."""

    pass


class PersistenceError(EcrSecretOperatorError):
    """Reading or writing cluster objects failed."""

    def __init__(
        self,
        message: str,
        status: int | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.status = status


class NotFoundError(PersistenceError):
    """The requested object does not exist."""

    pass


class CacheNotStartedError(PersistenceError):
    """The cluster client is not ready yet; callers should try again later."""

    pass
