"""Shared fixtures."""

import pytest

from kubeforge.compiler import Compiler, MemoryIdentifierStore
from kubeforge.models.config import CompilerConfig
from kubeforge.models.workload import ContainerSpec, WorkloadSpec


@pytest.fixture
def store():
    """In-memory identifier store."""
    return MemoryIdentifierStore()


@pytest.fixture
def compiler(store):
    """Compiler with default configuration."""
    return Compiler(config=CompilerConfig(), store=store)


@pytest.fixture
def web_workload():
    """Single nginx container with one variable, no service."""
    return WorkloadSpec(
        name="app",
        namespace="ns1",
        containers={
            "web": ContainerSpec(image="nginx", variables={"FOO": "bar"}),
        },
    )
