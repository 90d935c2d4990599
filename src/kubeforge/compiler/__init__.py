"""Workload compilation stages."""

from kubeforge.compiler.engine import Compiler
from kubeforge.compiler.errors import ManifestError
from kubeforge.compiler.state import (
    BaseIdentifierStore,
    FileIdentifierStore,
    MemoryIdentifierStore,
)

__all__ = [
    "Compiler",
    "ManifestError",
    "BaseIdentifierStore",
    "FileIdentifierStore",
    "MemoryIdentifierStore",
]
