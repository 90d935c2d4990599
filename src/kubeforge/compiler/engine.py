"""Compilation pipeline from workload spec to manifests."""

import logging
from datetime import datetime
from typing import Optional

from kubeforge.compiler.checksum import compute_checksum
from kubeforge.compiler.normalizer import normalize
from kubeforge.compiler.secrets import materialize_secrets
from kubeforge.compiler.service import render_service
from kubeforge.compiler.state import BaseIdentifierStore, MemoryIdentifierStore, resolve_identifier
from kubeforge.compiler.workload import render_workload
from kubeforge.models.config import CompilerConfig
from kubeforge.models.manifest import RenderResult
from kubeforge.models.workload import WorkloadSpec


logger = logging.getLogger(__name__)


class Compiler:
    """Turns a WorkloadSpec into Secrets, a workload and an optional Service."""
    
    def __init__(
        self,
        config: Optional[CompilerConfig] = None,
        store: Optional[BaseIdentifierStore] = None,
    ):
        """Initialize compiler."""
        self.config = config or CompilerConfig()
        self.store = store if store is not None else MemoryIdentifierStore()
        self.last_compilation: Optional[datetime] = None
        
    @staticmethod
    def identifier_key(spec: WorkloadSpec) -> str:
        """Key under which the workload's identifier is persisted."""
        return f"{spec.namespace}/{spec.name}"
        
    def compile(self, spec: WorkloadSpec) -> RenderResult:
        """Compile a workload. Raises before returning anything on invalid input."""
        start_time = datetime.now()
        logger.info(f"Compiling workload {spec.namespace}/{spec.name}")
        
        normalized = normalize(spec)
        secrets = materialize_secrets(normalized, self.config)
        checksum = compute_checksum(secrets)
        identifier = resolve_identifier(self.store, self.identifier_key(spec))
        
        workload = render_workload(normalized, secrets, identifier, checksum, self.config)
        service = render_service(normalized, identifier)
        
        self.last_compilation = datetime.now()
        duration = (self.last_compilation - start_time).total_seconds()
        logger.info(
            f"Compiled {normalized.kind.value} {spec.name} with {len(secrets)} secret(s)"
            f"{' and a service' if service else ''} in {duration:.3f}s"
        )
        
        return RenderResult(
            name=spec.name,
            namespace=spec.namespace,
            kind=normalized.kind,
            identifier=identifier,
            checksum=checksum,
            secrets=secrets,
            workload=workload,
            service=service,
            wait_for_rollout=spec.wait_for_rollout,
        )
