# ecr_secret_operator/config/__init__.py

"""
Operator settings and the per-account credentials file.
"""

from .base import LogFormat, OperatorSettings
from .credentials import (
    ACCESS_KEY,
    ERROR_FMT_MISSING_CREDS,
    ERROR_FMT_MISSING_KEY,
    SECRET_KEY,
    load_credentials,
    load_credentials_file,
    parse_credentials,
)
from .errors import ConfigError, ConfigFileError, MissingCredentialsError

__all__ = [
    "OperatorSettings",
    "LogFormat",
    "ACCESS_KEY",
    "SECRET_KEY",
    "ERROR_FMT_MISSING_CREDS",
    "ERROR_FMT_MISSING_KEY",
    "load_credentials",
    "load_credentials_file",
    "parse_credentials",
    "ConfigError",
    "ConfigFileError",
    "MissingCredentialsError",
]
