# ecr_secret_operator/core/exceptions/__init__.py

"""
Core exception classes for the ECR secret operator.
"""

from .base import (
    CacheNotStartedError,
    ConfigurationError,
    CredentialSourceError,
    EcrSecretOperatorError,
    FatalConfigurationError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)

__all__ = [
    "EcrSecretOperatorError",
    "ConfigurationError",
    "FatalConfigurationError",
    "ValidationError",
    "CredentialSourceError",
    "PersistenceError",
    "NotFoundError",
    "CacheNotStartedError",
]
