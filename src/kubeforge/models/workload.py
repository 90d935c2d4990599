"""Workload specification models."""

import base64
import binascii
import re
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


DNS_LABEL = re.compile(r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?$")
SECRET_KEY = re.compile(r"^[-._a-zA-Z0-9]+$")


def _validate_dns_label(value: str, what: str) -> str:
    if len(value) > 63 or not DNS_LABEL.match(value):
        raise ValueError(f"Invalid {what} {value!r}: must be a lowercase RFC 1123 label")
    return value


class _InputModel(BaseModel):
    """Base for workload input: unknown keys are errors, camelCase accepted."""
    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class FileSpec(_InputModel):
    """File mounted into a container."""
    source: Optional[str] = Field(None, description="External file reference, not materialized")
    content: Optional[str] = Field(None, description="Inline text content")
    binary_content: Optional[str] = Field(
        None, alias="binaryContent", description="Inline base64-encoded content"
    )
    mode: Optional[str] = Field(None, description="Octal file mode, e.g. 0644")
    no_expand: bool = Field(default=False, alias="noExpand")

    @field_validator("binary_content")
    @classmethod
    def validate_binary_content(cls, v):
        """Binary content must be valid base64."""
        if v is None:
            return v
        try:
            base64.b64decode(v, validate=True)
        except binascii.Error as e:
            raise ValueError(f"binaryContent is not valid base64: {e}")
        return v

    @field_validator("mode", mode="before")
    @classmethod
    def octal_digits(cls, v):
        """Unquoted YAML modes such as 644 arrive as ints; read their digits as octal."""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("mode")
    @classmethod
    def validate_mode(cls, v):
        """Validate octal file mode."""
        if v is None:
            return v
        try:
            mode = int(v, 8)
        except ValueError:
            raise ValueError(f"Invalid file mode: {v}")
        if not 0 <= mode <= 0o777:
            raise ValueError(f"File mode out of range: {v}")
        return v

    @model_validator(mode="after")
    def check_single_origin(self):
        """Exactly one of source, content and binaryContent must be given."""
        given = [
            name for name, value in (
                ("source", self.source),
                ("content", self.content),
                ("binaryContent", self.binary_content),
            )
            if value is not None
        ]
        if len(given) != 1:
            raise ValueError(
                "file requires exactly one of source, content, binaryContent"
                + (f" (got {', '.join(given)})" if given else "")
            )
        return self

    @property
    def is_inline(self) -> bool:
        return self.content is not None or self.binary_content is not None

    @property
    def octal_mode(self) -> Optional[int]:
        return int(self.mode, 8) if self.mode is not None else None


class VolumeSpec(_InputModel):
    """External persistent volume claim mount."""
    source: str = Field(..., description="PersistentVolumeClaim name")
    path: Optional[str] = Field(None, description="Sub-path inside the volume")
    read_only: bool = Field(default=False, alias="readOnly")


class ResourceValues(_InputModel):
    """CPU and memory quantities, both optional."""
    cpu: Optional[str] = None
    memory: Optional[str] = None

    @field_validator("cpu", "memory", mode="before")
    @classmethod
    def stringify_quantity(cls, v):
        """Accept unquoted numeric quantities such as ``cpu: 0.5``."""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v


class ResourcesSpec(_InputModel):
    """Container resource limits and requests."""
    limits: Optional[ResourceValues] = None
    requests: Optional[ResourceValues] = None


class HttpHeader(_InputModel):
    name: str
    value: str


class HttpGetSpec(_InputModel):
    """HTTP GET probe action."""
    path: str = Field(..., description="Request path")
    port: int = Field(..., ge=1, le=65535)
    host: Optional[str] = None
    scheme: Optional[Literal["HTTP", "HTTPS"]] = None
    http_headers: List[HttpHeader] = Field(default_factory=list, alias="httpHeaders")


class ExecSpec(_InputModel):
    """Command probe action."""
    command: List[str] = Field(..., min_length=1)


class ProbeSpec(_InputModel):
    """Liveness or readiness probe; HTTP GET and exec are mutually exclusive."""
    http_get: Optional[HttpGetSpec] = Field(None, alias="httpGet")
    exec_action: Optional[ExecSpec] = Field(None, alias="exec")

    @model_validator(mode="after")
    def check_single_action(self):
        """Exactly one probe action must be set."""
        if (self.http_get is None) == (self.exec_action is None):
            raise ValueError("probe requires exactly one of httpGet, exec")
        return self


class ContainerSpec(_InputModel):
    """Container specification."""
    image: str = Field(..., min_length=1, description="Container image")
    command: Optional[List[str]] = None
    args: Optional[List[str]] = None
    variables: Dict[str, str] = Field(default_factory=dict)
    files: Dict[str, FileSpec] = Field(default_factory=dict, description="Keyed by mount path")
    volumes: Dict[str, VolumeSpec] = Field(default_factory=dict, description="Keyed by mount path")
    resources: Optional[ResourcesSpec] = None
    liveness_probe: Optional[ProbeSpec] = Field(None, alias="livenessProbe")
    readiness_probe: Optional[ProbeSpec] = Field(None, alias="readinessProbe")

    @field_validator("variables", mode="before")
    @classmethod
    def stringify_variables(cls, v):
        """Accept YAML scalars such as numbers and booleans as variable values."""
        if not isinstance(v, dict):
            return v
        result = {}
        for name, value in v.items():
            if isinstance(value, bool):
                value = "true" if value else "false"
            elif isinstance(value, (int, float)):
                value = str(value)
            result[name] = value
        return result

    @field_validator("files", "volumes")
    @classmethod
    def validate_mount_paths(cls, v):
        """Mount paths must be absolute and below the root."""
        for path in v:
            if not path.startswith("/"):
                raise ValueError(f"Mount path must be absolute: {path}")
            if path.rstrip("/") == "":
                raise ValueError("Mount path must not be the root directory")
        return v

    @field_validator("files")
    @classmethod
    def validate_file_names(cls, v):
        """File names become Secret data keys and must be valid as such."""
        for path in v:
            name = path.rstrip("/").rsplit("/", 1)[-1]
            if name in (".", "..") or len(name) > 253 or not SECRET_KEY.match(name):
                raise ValueError(
                    f"Invalid file name {name!r} in mount path {path}: "
                    "only letters, digits, '-', '_' and '.' are allowed"
                )
        return v


class ServicePort(_InputModel):
    """Service port mapping."""
    port: int = Field(..., ge=1, le=65535)
    target_port: Optional[int] = Field(None, alias="targetPort", ge=1, le=65535)
    protocol: Literal["TCP", "UDP", "SCTP"] = Field(default="TCP")


class ServiceSpec(_InputModel):
    """Service specification."""
    ports: Dict[str, ServicePort] = Field(default_factory=dict)


class WorkloadSpec(_InputModel):
    """Top-level workload specification."""
    name: str = Field(..., description="Workload name")
    namespace: str = Field(default="default")
    annotations: Dict[str, str] = Field(default_factory=dict)
    additional_annotations: Dict[str, str] = Field(
        default_factory=dict, alias="additionalAnnotations"
    )
    containers: Dict[str, ContainerSpec] = Field(..., min_length=1)
    service: Optional[ServiceSpec] = None
    service_account_name: Optional[str] = Field(None, alias="serviceAccountName")
    wait_for_rollout: bool = Field(default=True, alias="waitForRollout")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return _validate_dns_label(v, "workload name")

    @field_validator("namespace")
    @classmethod
    def validate_namespace(cls, v):
        return _validate_dns_label(v, "namespace")

    @field_validator("containers")
    @classmethod
    def validate_container_keys(cls, v):
        for key in v:
            _validate_dns_label(key, "container name")
        return v
