"""Tests for rendered output models."""

import base64

from kubeforge.models.manifest import RenderResult, SecretManifest, WorkloadKind


def _result(kind, service=None):
    return RenderResult(
        name="app",
        namespace="ns1",
        kind=kind,
        identifier="0123456789abcdef",
        checksum="abc",
        secrets=[
            SecretManifest(name="app-web-env", namespace="ns1", checksum_key="env-web", data={"A": "b"}),
            SecretManifest(name="app-api-env", namespace="ns1", checksum_key="env-api", data={"C": "d"}),
        ],
        workload={"kind": kind.value, "metadata": {"name": "app", "namespace": "ns1"}},
        service=service,
    )


class TestSecretManifest:
    """Test SecretManifest serialization."""
    
    def test_text_data_encoded(self):
        """Test text values are base64-encoded on serialization only."""
        secret = SecretManifest(
            name="app-web-env",
            namespace="ns1",
            checksum_key="env-web",
            data={"FOO": "bar"},
        )
        manifest = secret.to_manifest()
        
        assert secret.data == {"FOO": "bar"}
        assert manifest["kind"] == "Secret"
        assert manifest["type"] == "Opaque"
        assert manifest["metadata"] == {"name": "app-web-env", "namespace": "ns1"}
        assert base64.b64decode(manifest["data"]["FOO"]) == b"bar"
        
    def test_binary_data_passed_through(self):
        """Test binary values are already base64 and kept verbatim."""
        secret = SecretManifest(
            name="app-web-1234567890",
            namespace="ns1",
            checksum_key="file-web-1234567890",
            binary_data={"logo.png": "iVBORw0KGgo="},
        )
        
        assert secret.to_manifest()["data"] == {"logo.png": "iVBORw0KGgo="}
        
    def test_payload_separates_channels(self):
        """Test checksum payload keeps text and binary apart."""
        secret = SecretManifest(
            name="s",
            namespace="ns1",
            checksum_key="file-web-x",
            data={"b": "2", "a": "1"},
        )
        
        assert secret.payload() == {"data": {"a": "1", "b": "2"}, "binaryData": {}}


class TestRenderResult:
    """Test RenderResult helpers."""
    
    def test_deployment_outputs(self):
        """Test outputs for a Deployment without service."""
        outputs = _result(WorkloadKind.DEPLOYMENT).outputs()
        
        assert outputs == {
            "namespace": "ns1",
            "service_name": None,
            "deployment_name": "app",
            "statefulset_name": None,
        }
        
    def test_statefulset_outputs_with_service(self):
        """Test outputs for a StatefulSet with a service."""
        service = {"kind": "Service", "metadata": {"name": "app", "namespace": "ns1"}}
        outputs = _result(WorkloadKind.STATEFULSET, service=service).outputs()
        
        assert outputs["service_name"] == "app"
        assert outputs["deployment_name"] is None
        assert outputs["statefulset_name"] == "app"
        
    def test_manifest_order(self):
        """Test secrets come first sorted by name, then workload, then service."""
        service = {"kind": "Service", "metadata": {"name": "app", "namespace": "ns1"}}
        manifests = _result(WorkloadKind.DEPLOYMENT, service=service).manifests()
        
        assert [m["kind"] for m in manifests] == ["Secret", "Secret", "Deployment", "Service"]
        assert manifests[0]["metadata"]["name"] == "app-api-env"
        
