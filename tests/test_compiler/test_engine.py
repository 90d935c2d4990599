"""Tests for the Compiler pipeline."""

import base64

import pytest

from kubeforge.compiler import Compiler, ManifestError, MemoryIdentifierStore
from kubeforge.compiler.checksum import CHECKSUM_ANNOTATION
from kubeforge.compiler.normalizer import KIND_ANNOTATION
from kubeforge.compiler.workload import INSTANCE_LABEL
from kubeforge.models.manifest import WorkloadKind
from kubeforge.models.workload import WorkloadSpec


def _kinds(result):
    return [manifest["kind"] for manifest in result.manifests()]


class TestCompile:
    """Test Compiler.compile()."""
    
    def test_single_container_scenario(self, compiler, web_workload):
        """Test one container with one variable and no service."""
        result = compiler.compile(web_workload)
        
        assert _kinds(result) == ["Secret", "Deployment"]
        assert [secret.name for secret in result.secrets] == ["app-web-env"]
        assert result.secrets[0].data == {"FOO": "bar"}
        assert result.service is None
        
        container = result.workload["spec"]["template"]["spec"]["containers"][0]
        assert container["name"] == "web"
        assert container["image"] == "nginx"
        assert container["envFrom"] == [{"secretRef": {"name": "app-web-env"}}]
        
        annotations = result.workload["spec"]["template"]["metadata"]["annotations"]
        assert annotations[CHECKSUM_ANNOTATION]
        assert annotations[CHECKSUM_ANNOTATION] == result.checksum
        
        secret_manifest = result.manifests()[0]
        assert secret_manifest["metadata"]["namespace"] == "ns1"
        assert base64.b64decode(secret_manifest["data"]["FOO"]) == b"bar"
        
    def test_exactly_one_workload(self, compiler):
        """Test a Deployment or a StatefulSet is rendered, never both."""
        for annotation, expected in [
            (None, "Deployment"),
            ("StatefulSet", "StatefulSet"),
            ("Deployment", "Deployment"),
            ("CronJob", "Deployment"),
        ]:
            annotations = {KIND_ANNOTATION: annotation} if annotation else {}
            spec = WorkloadSpec.model_validate({
                "name": "app",
                "annotations": annotations,
                "containers": {"web": {"image": "nginx"}},
            })
            kinds = _kinds(compiler.compile(spec))
            
            assert kinds.count("Deployment") + kinds.count("StatefulSet") == 1
            assert expected in kinds
            
    def test_service_scenario(self, compiler):
        """Test a service with one http port."""
        spec = WorkloadSpec.model_validate({
            "name": "app",
            "containers": {"web": {"image": "nginx"}},
            "service": {"ports": {"http": {"port": 8080}}},
        })
        result = compiler.compile(spec)
        
        assert result.service["spec"]["ports"] == [
            {"name": "http", "port": 8080, "targetPort": 8080, "protocol": "TCP"},
        ]
        assert result.service["spec"]["selector"] == result.workload["spec"]["selector"]["matchLabels"]
        assert _kinds(result) == ["Deployment", "Service"]
        
    def test_outputs(self, compiler):
        """Test the output summary of a StatefulSet with service."""
        spec = WorkloadSpec.model_validate({
            "name": "db",
            "namespace": "data",
            "annotations": {KIND_ANNOTATION: "StatefulSet"},
            "containers": {"postgres": {"image": "postgres:16"}},
            "service": {"ports": {"pg": {"port": 5432}}},
        })
        result = compiler.compile(spec)
        
        assert result.kind == WorkloadKind.STATEFULSET
        assert result.outputs() == {
            "namespace": "data",
            "service_name": "db",
            "deployment_name": None,
            "statefulset_name": "db",
        }
        
    def test_wait_for_rollout_passthrough(self, compiler):
        """Test the rollout flag reaches the result."""
        spec = WorkloadSpec.model_validate({
            "name": "app",
            "waitForRollout": False,
            "containers": {"web": {"image": "nginx"}},
        })
        
        assert compiler.compile(spec).wait_for_rollout is False
        
    def test_invalid_input_raises(self, compiler):
        """Test compile errors abort without partial output."""
        spec = WorkloadSpec.model_validate({
            "name": "app",
            "containers": {
                "api": {"image": "python", "files": {"/etc/x": {"content": "a"}}},
                "web": {"image": "nginx", "files": {"/etc/x": {"content": "b"}}},
            },
        })
        
        with pytest.raises(ManifestError):
            compiler.compile(spec)
            
        assert compiler.store.get("default/app") is None


class TestIdempotence:
    """Test repeated compilation."""
    
    def test_identical_input_identical_output(self, compiler, web_workload):
        """Test two compilations with a shared store are identical."""
        first = compiler.compile(web_workload)
        second = compiler.compile(web_workload)
        
        assert first.checksum == second.checksum
        assert first.identifier == second.identifier
        assert first.manifests() == second.manifests()
        
    def test_identifier_persisted(self, web_workload):
        """Test a fresh compiler reuses the stored identifier."""
        store = MemoryIdentifierStore()
        first = Compiler(store=store).compile(web_workload)
        second = Compiler(store=store).compile(web_workload)
        
        assert first.identifier == second.identifier
        assert first.workload["spec"]["selector"]["matchLabels"] == {INSTANCE_LABEL: first.identifier}
        
    def test_new_store_new_identifier(self, web_workload):
        """Test only the identifier differs without persisted state."""
        first = Compiler().compile(web_workload)
        second = Compiler().compile(web_workload)
        
        assert first.identifier != second.identifier
        assert first.checksum == second.checksum
        assert [s.name for s in first.secrets] == [s.name for s in second.secrets]
        
    def test_checksum_ignores_declaration_order(self, compiler):
        """Test reordering containers and files keeps the checksum."""
        web = {
            "image": "nginx",
            "variables": {"A": "1", "B": "2"},
            "files": {"/etc/a.conf": {"content": "a"}, "/etc/b.conf": {"content": "b"}},
        }
        web_reordered = {
            "image": "nginx",
            "variables": {"B": "2", "A": "1"},
            "files": {"/etc/b.conf": {"content": "b"}, "/etc/a.conf": {"content": "a"}},
        }
        api = {"image": "python", "variables": {"C": "3"}}
        
        first = compiler.compile(WorkloadSpec.model_validate({
            "name": "app", "containers": {"web": web, "api": api},
        }))
        second = compiler.compile(WorkloadSpec.model_validate({
            "name": "app", "containers": {"api": api, "web": web_reordered},
        }))
        
        assert first.checksum == second.checksum
        
    def test_checksum_tracks_content(self, compiler):
        """Test changing a file byte changes the checksum."""
        def spec(content):
            return WorkloadSpec.model_validate({
                "name": "app",
                "containers": {"web": {"image": "nginx", "files": {"/etc/a.conf": {"content": content}}}},
            })
            
        assert compiler.compile(spec("abc")).checksum != compiler.compile(spec("abd")).checksum
