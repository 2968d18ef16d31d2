# ecr_secret_operator/aws/ecr.py

"""
ECR authorization token source.

Wraps the ECR ``GetAuthorizationToken`` call behind a small protocol so the
lifecycle engine can be exercised against a fake in tests.
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime
import logging
from typing import Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..core.exceptions import CredentialSourceError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AwsCredentials:
    """Static IAM credentials for one AWS account."""

    access_key_id: str
    secret_access_key: str

    def __repr__(self) -> str:
        return f"AwsCredentials(access_key_id={self.access_key_id!r}, secret_access_key='***')"


@dataclass(frozen=True)
class AuthorizationData:
    """One registry authorization token as returned by ECR."""

    authorization_token: str
    proxy_endpoint: str
    expires_at: datetime


class ECRAuthentication(Protocol):
    """Source of short-lived registry credentials."""

    async def configure(self, credentials: AwsCredentials, region: str) -> None: ...

    async def fetch_token(self) -> AuthorizationData: ...


class Boto3ECRAuthentication:
    """ECRAuthentication backed by a boto3 session per configured account."""

    def __init__(self) -> None:
        self.session: boto3.Session | None = None
        self.region: str | None = None

    async def configure(self, credentials: AwsCredentials, region: str) -> None:
        """Create a session for the given account credentials and region."""
        try:
            self.session = boto3.Session(
                aws_access_key_id=credentials.access_key_id,
                aws_secret_access_key=credentials.secret_access_key,
                region_name=region,
            )
            self.region = region
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to create AWS session for region {region}: {e}")
            raise CredentialSourceError(
                f"Failed to create AWS session: {e}", original_error=e
            ) from e

    async def fetch_token(self) -> AuthorizationData:
        """Request an authorization token for the configured account."""
        if self.session is None:
            raise CredentialSourceError("ECR authentication has not been configured")

        try:
            ecr = self.session.client("ecr", region_name=self.region)
            response = await asyncio.to_thread(ecr.get_authorization_token)
        except (BotoCoreError, ClientError) as e:
            logger.error(f"ECR GetAuthorizationToken failed: {e}")
            raise CredentialSourceError(
                f"Failed to get ECR authorization token: {e}", original_error=e
            ) from e

        data = response.get("authorizationData") or []
        if not data:
            raise CredentialSourceError("ECR returned no authorization data")

        first = data[0]
        return AuthorizationData(
            authorization_token=first["authorizationToken"],
            proxy_endpoint=first["proxyEndpoint"],
            expires_at=first["expiresAt"],
        )
