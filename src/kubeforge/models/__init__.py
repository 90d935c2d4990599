"""Pydantic models for configuration, workload input and rendered output."""

from kubeforge.models.config import CompilerConfig, StateConfig
from kubeforge.models.manifest import RenderResult, SecretManifest, WorkloadKind
from kubeforge.models.workload import (
    ContainerSpec,
    ExecSpec,
    FileSpec,
    HttpGetSpec,
    HttpHeader,
    ProbeSpec,
    ResourcesSpec,
    ResourceValues,
    ServicePort,
    ServiceSpec,
    VolumeSpec,
    WorkloadSpec,
)

__all__ = [
    "CompilerConfig",
    "StateConfig",
    "RenderResult",
    "SecretManifest",
    "WorkloadKind",
    "ContainerSpec",
    "ExecSpec",
    "FileSpec",
    "HttpGetSpec",
    "HttpHeader",
    "ProbeSpec",
    "ResourcesSpec",
    "ResourceValues",
    "ServicePort",
    "ServiceSpec",
    "VolumeSpec",
    "WorkloadSpec",
]
