"""Compiler exceptions."""


class ManifestError(ValueError):
    """Workload input that cannot be compiled into manifests."""
