# ecr_secret_operator/config/credentials.py

"""
Per-account AWS credentials file.

The file is TOML with one table per 12-digit account id:

    [123456789012]
    access_key = "AKIA..."
    secret_key = "..."
"""

from pathlib import Path
import tomllib
from typing import Any, BinaryIO

from ..aws.ecr import AwsCredentials
from .errors import ConfigFileError, MissingCredentialsError

ACCESS_KEY = "access_key"
SECRET_KEY = "secret_key"

ERROR_FMT_MISSING_CREDS = "FATAL: Credentials for account '{}' not present in configuration"
ERROR_FMT_MISSING_KEY = "'{}' missing from config"


def parse_credentials(
    configuration: dict[str, Any], account_id: str, config_file: str | None = None
) -> AwsCredentials:
    """
    Pick the credentials for one account out of a decoded configuration.

    Raises:
        MissingCredentialsError: If the account or either key is absent.
    """
    creds = configuration.get(account_id)
    if not isinstance(creds, dict):
        raise MissingCredentialsError(
            ERROR_FMT_MISSING_CREDS.format(account_id), config_file
        )

    access_key = creds.get(ACCESS_KEY)
    secret_key = creds.get(SECRET_KEY)

    if isinstance(access_key, str) and isinstance(secret_key, str):
        return AwsCredentials(access_key_id=access_key, secret_access_key=secret_key)

    errors = []
    if not isinstance(access_key, str):
        errors.append(ERROR_FMT_MISSING_KEY.format(ACCESS_KEY))
    if not isinstance(secret_key, str):
        errors.append(ERROR_FMT_MISSING_KEY.format(SECRET_KEY))

    raise MissingCredentialsError(f"FATAL: {', '.join(errors)}", config_file)


def load_credentials(stream: BinaryIO, account_id: str) -> AwsCredentials:
    """
    Load credentials for an account from a TOML stream opened in binary mode.

    Raises:
        ConfigFileError: If the stream is not valid TOML.
        MissingCredentialsError: If the account or either key is absent.
    """
    config_file = getattr(stream, "name", None)
    try:
        configuration = tomllib.load(stream)
    except tomllib.TOMLDecodeError as e:
        raise ConfigFileError(
            f"Invalid TOML configuration: {e}", config_file, e
        ) from e

    return parse_credentials(configuration, account_id, config_file)


def load_credentials_file(path: str | Path, account_id: str) -> AwsCredentials:
    """
    Open the credentials file and load credentials for an account.

    The file is re-read on every call so edits take effect without a restart.
    """
    try:
        with open(path, "rb") as f:
            return load_credentials(f, account_id)
    except OSError as e:
        raise ConfigFileError(
            f"FATAL: Cannot load '{path}'", str(path), e
        ) from e
