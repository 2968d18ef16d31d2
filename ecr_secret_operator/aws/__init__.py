# ecr_secret_operator/aws/__init__.py

"""
AWS integration: the ECR authorization token source.
"""

from .ecr import (
    AuthorizationData,
    AwsCredentials,
    Boto3ECRAuthentication,
    ECRAuthentication,
)

__all__ = [
    "AuthorizationData",
    "AwsCredentials",
    "Boto3ECRAuthentication",
    "ECRAuthentication",
]
