"""
kubeforge - Workload manifest compiler.

Translates a declarative workload description (containers, files, volumes,
probes, resources, service ports) into Kubernetes Secrets, a Deployment or
StatefulSet, and an optional Service.
"""

__version__ = "1.0.0"

# Re-export key components for easier access
from kubeforge.compiler import Compiler, ManifestError
from kubeforge.models.config import CompilerConfig
from kubeforge.models.manifest import RenderResult, WorkloadKind
from kubeforge.models.workload import ContainerSpec, WorkloadSpec

__all__ = [
    "Compiler",
    "ManifestError",
    "CompilerConfig",
    "RenderResult",
    "WorkloadKind",
    "ContainerSpec",
    "WorkloadSpec",
]
