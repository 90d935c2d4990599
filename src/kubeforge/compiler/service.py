"""Service rendering."""

import logging
from typing import Any, Dict, Optional

from kubeforge.compiler.normalizer import NormalizedWorkload
from kubeforge.compiler.workload import selector_labels, workload_labels


logger = logging.getLogger(__name__)


def render_service(workload: NormalizedWorkload, identifier: str) -> Optional[Dict[str, Any]]:
    """Render a Service if the workload declares at least one port."""
    service = workload.spec.service
    if service is None or not service.ports:
        logger.debug(f"No service ports declared for {workload.name}")
        return None
        
    ports = [
        {
            "name": name,
            "port": port.port,
            "targetPort": port.target_port if port.target_port is not None else port.port,
            "protocol": port.protocol,
        }
        for name, port in sorted(service.ports.items())
    ]
    
    logger.debug(f"Rendered service {workload.name} with {len(ports)} port(s)")
    return {
        "apiVersion": "v1",
        "kind": "Service",
        "metadata": {
            "name": workload.name,
            "namespace": workload.namespace,
            "labels": workload_labels(workload.name, identifier),
        },
        "spec": {
            "selector": selector_labels(identifier),
            "ports": ports,
        },
    }
