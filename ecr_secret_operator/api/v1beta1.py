# ecr_secret_operator/api/v1beta1.py

"""
ECRSecret custom resource, version v1beta1.

An ECRSecret names an ECR registry and, optionally, the name of the
docker-registry secret that should hold credentials for it.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..core.exceptions import ValidationError as ResourceValidationError
from ..ksecret.record import OwnerReference

GROUP = "secrets.fireflycons.io"
VERSION = "v1beta1"
API_VERSION = f"{GROUP}/{VERSION}"
KIND = "ECRSecret"
PLURAL = "ecrsecrets"
SINGULAR = "ecrsecret"

REGISTRY_PATTERN = (
    r"^\d{12}\.dkr.ecr.(ap|ca|eu|sa|us(-gov)?)-"
    r"(east|northeast|southeast|north|south|southeast|central|west)-\d\.amazonaws\.com$"
)
SECRET_NAME_PATTERN = r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?(\.[a-z0-9]([-a-z0-9]*[a-z0-9])?)*$"


class ObjectMeta(BaseModel):
    """The subset of Kubernetes object metadata the operator reads."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str
    namespace: str = "default"
    uid: str = ""
    resource_version: str | None = Field(default=None, alias="resourceVersion")


class ECRSecretSpec(BaseModel):
    """Desired state of an ECRSecret."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    registry: str = ""
    secret_name: str = Field(default="", alias="secretName")


class ECRSecretStatus(BaseModel):
    """Observed state of an ECRSecret."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    last_updated: datetime | None = Field(default=None, alias="lastUpdated")


class ECRSecret(BaseModel):
    """The ECRSecret declared resource."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    api_version: str = Field(default=API_VERSION, alias="apiVersion")
    kind: str = KIND
    metadata: ObjectMeta
    spec: ECRSecretSpec = Field(default_factory=ECRSecretSpec)
    status: ECRSecretStatus = Field(default_factory=ECRSecretStatus)

    @classmethod
    def from_k8s(cls, obj: dict[str, Any]) -> "ECRSecret":
        """
        Build from the dict returned by the custom objects API.

        Raises:
            ValidationError: If the object does not match the schema.
        """
        try:
            return cls.model_validate(obj)
        except ValidationError as e:
            raise ResourceValidationError(
                f"Invalid {KIND}: {e}", original_error=e
            ) from e

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def namespace(self) -> str:
        return self.metadata.namespace

    @property
    def account_id(self) -> str:
        return parse_registry(self.spec.registry)[0]

    @property
    def region(self) -> str:
        return parse_registry(self.spec.registry)[1]

    def kube_secret_name(self) -> str:
        """Name of the docker-registry secret this resource owns."""
        if self.spec.secret_name.strip():
            return self.spec.secret_name
        return f"{self.metadata.name}-secret"

    def owner_reference(self) -> OwnerReference:
        """Controller reference pointing back at this resource."""
        return OwnerReference(
            api_version=self.api_version,
            kind=self.kind,
            name=self.metadata.name,
            uid=self.metadata.uid,
            controller=True,
            block_owner_deletion=True,
        )


def parse_registry(registry: str) -> tuple[str, str]:
    """
    Split an ECR registry host into account id and region.

    Raises:
        ValidationError: If the host does not have the ECR shape.
    """
    parts = registry.split(".")
    if len(parts) < 4 or not parts[0] or not parts[3]:
        raise ResourceValidationError(f"Cannot parse ECR registry '{registry}'")
    return parts[0], parts[3]


def crd_manifest() -> dict[str, Any]:
    """CustomResourceDefinition for ECRSecret."""
    return {
        "apiVersion": "apiextensions.k8s.io/v1",
        "kind": "CustomResourceDefinition",
        "metadata": {"name": f"{PLURAL}.{GROUP}"},
        "spec": {
            "group": GROUP,
            "names": {
                "kind": KIND,
                "listKind": f"{KIND}List",
                "plural": PLURAL,
                "singular": SINGULAR,
            },
            "scope": "Namespaced",
            "versions": [
                {
                    "name": VERSION,
                    "served": True,
                    "storage": True,
                    "subresources": {"status": {}},
                    "schema": {
                        "openAPIV3Schema": {
                            "description": "ECRSecret is the Schema for the ecrsecrets API",
                            "type": "object",
                            "properties": {
                                "apiVersion": {"type": "string"},
                                "kind": {"type": "string"},
                                "metadata": {"type": "object"},
                                "spec": {
                                    "description": "ECRSecretSpec defines the desired state of ECRSecret",
                                    "type": "object",
                                    "properties": {
                                        "registry": {
                                            "type": "string",
                                            "pattern": REGISTRY_PATTERN,
                                        },
                                        "secretName": {
                                            "type": "string",
                                            "pattern": SECRET_NAME_PATTERN,
                                        },
                                    },
                                },
                                "status": {
                                    "description": "ECRSecretStatus defines the observed state of ECRSecret",
                                    "type": "object",
                                    "properties": {
                                        "lastUpdated": {
                                            "type": "string",
                                            "format": "date-time",
                                        }
                                    },
                                },
                            },
                        }
                    },
                }
            ],
        },
    }
