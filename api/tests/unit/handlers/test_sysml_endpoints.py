"""Unit tests for SysML model and diagram API endpoints."""

from unittest.mock import Mock, patch

import pytest
from fastapi.testclient import TestClient

from sysml_api.main import app
from sysml_api.services.errors import (
    CompositionError,
    DiagramNotFoundError,
    ElementNotFoundError,
    RelationshipEndpointError,
)


@pytest.fixture
def client():
    """Create test client for FastAPI app."""
    return TestClient(app)


@pytest.fixture
def mock_model_service():
    """Patch the model service used by the handlers."""
    with patch("sysml_api.handlers.model.get_neo4j_client"), \
         patch("sysml_api.handlers.model.ModelService") as mock_service_class:
        mock_service = Mock()
        mock_service_class.return_value = mock_service
        yield mock_service


@pytest.fixture
def mock_diagram_service():
    """Patch the diagram service used by the handlers."""
    with patch("sysml_api.handlers.diagram.get_neo4j_client"), \
         patch("sysml_api.handlers.diagram.DiagramService") as mock_service_class:
        mock_service = Mock()
        mock_service_class.return_value = mock_service
        yield mock_service


@pytest.mark.unit
class TestViewpointEndpoints:
    """Test suite for viewpoint catalog endpoints."""

    def test_list_viewpoints(self, client):
        response = client.get("/api/sysml/viewpoints")

        assert response.status_code == 200
        data = response.json()
        assert [vp["id"] for vp in data][:2] == ["sysml.structuralDefinition", "sysml.usageStructure"]
        assert "includeNodeKinds" in data[0]

    def test_viewpoint_types(self, client):
        response = client.get("/api/sysml/viewpoints/sysml.requirement/types")

        assert response.status_code == 200
        assert response.json() == {
            "nodeKinds": ["requirement-definition", "requirement-usage"],
            "edgeKinds": ["satisfy", "refine", "verify", "dependency"],
        }

    def test_unknown_viewpoint_types_are_empty(self, client):
        response = client.get("/api/sysml/viewpoints/nope/types")

        assert response.status_code == 200
        assert response.json() == {"nodeKinds": [], "edgeKinds": []}

    def test_version_header(self, client):
        response = client.get("/healthz")

        assert response.status_code == 200
        assert "X-API-Version" in response.headers


@pytest.mark.unit
class TestModelEndpoints:
    """Test suite for model, element and relationship endpoints."""

    def test_get_model(self, client, mock_model_service):
        mock_model_service.fetch_model.return_value = {
            "nodes": [{"kind": "part-definition", "spec": {"id": "e", "name": "E"}}],
            "relationships": [],
        }

        response = client.get("/api/sysml/model", params={"viewpoint": "sysml.structuralDefinition"})

        assert response.status_code == 200
        assert response.json()["nodes"][0]["kind"] == "part-definition"
        mock_model_service.fetch_model.assert_called_once_with("sysml.structuralDefinition")

    def test_get_model_failure_is_500(self, client, mock_model_service):
        mock_model_service.fetch_model.side_effect = RuntimeError("db down")

        response = client.get("/api/sysml/model")

        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to fetch model"

    def test_create_element(self, client, mock_model_service):
        payload = {"kind": "part-definition", "spec": {"id": "engine", "name": "Engine"}}

        response = client.post("/api/sysml/elements", json=payload)

        assert response.status_code == 201
        assert response.json() == {"success": True}
        mock_model_service.create_element.assert_called_once_with("part-definition", payload["spec"])

    def test_create_element_unknown_kind(self, client, mock_model_service):
        response = client.post("/api/sysml/elements", json={"kind": "widget", "spec": {"id": "w", "name": "W"}})

        assert response.status_code == 400
        mock_model_service.create_element.assert_not_called()

    def test_create_element_requires_id_and_name(self, client, mock_model_service):
        response = client.post("/api/sysml/elements", json={"kind": "part-definition", "spec": {"id": "x"}})

        assert response.status_code == 400

    def test_update_missing_element_is_404(self, client, mock_model_service):
        mock_model_service.update_element.side_effect = ElementNotFoundError("missing")

        response = client.patch("/api/sysml/elements/missing", json={"updates": {"name": "x"}})

        assert response.status_code == 404

    def test_update_element_position(self, client, mock_model_service):
        response = client.patch(
            "/api/sysml/elements/engine/position",
            json={"viewpointId": "sysml.state", "position": {"x": 10, "y": 20}},
        )

        assert response.status_code == 200
        mock_model_service.update_element_position.assert_called_once_with(
            "engine", "sysml.state", {"x": 10.0, "y": 20.0}
        )

    def test_create_relationship_passes_extra_properties(self, client, mock_model_service):
        payload = {"id": "t1", "type": "transition", "source": "a", "target": "b", "trigger": "go"}

        response = client.post("/api/sysml/relationships", json=payload)

        assert response.status_code == 201
        sent = mock_model_service.create_relationship.call_args[0][0]
        assert sent["trigger"] == "go"
        assert "label" not in sent

    def test_create_relationship_unknown_type(self, client, mock_model_service):
        payload = {"id": "t1", "type": "teleport", "source": "a", "target": "b"}

        response = client.post("/api/sysml/relationships", json=payload)

        assert response.status_code == 400
        mock_model_service.create_relationship.assert_not_called()

    def test_create_relationship_missing_endpoint(self, client, mock_model_service):
        mock_model_service.create_relationship.side_effect = RelationshipEndpointError("a", "b")
        payload = {"id": "d1", "type": "dependency", "source": "a", "target": "b"}

        response = client.post("/api/sysml/relationships", json=payload)

        assert response.status_code == 400

    def test_create_composition(self, client, mock_model_service):
        mock_model_service.create_composition.return_value = {
            "partUsageId": "car-part-1",
            "definitionRelId": "car-part-1-definition-wheel",
            "compositionRelId": "car-composition-car-part-1",
        }

        response = client.post(
            "/api/sysml/compositions",
            json={"sourceId": "car", "targetId": "wheel", "partName": "frontLeft"},
        )

        assert response.status_code == 201
        assert response.json()["partUsageId"] == "car-part-1"
        mock_model_service.create_composition.assert_called_once_with("car", "wheel", "frontLeft", "composition")

    def test_create_composition_invalid_type_is_422(self, client, mock_model_service):
        response = client.post(
            "/api/sysml/compositions",
            json={"sourceId": "car", "targetId": "wheel", "partName": "x", "compositionType": "containment"},
        )

        assert response.status_code == 422

    def test_create_state_missing_endpoint_is_400(self, client, mock_model_service):
        mock_model_service.create_state_in_state_machine.side_effect = CompositionError("not found")

        response = client.post(
            "/api/sysml/state-machines/sm/states",
            json={"stateDefinitionId": "idle-def", "stateName": "idle"},
        )

        assert response.status_code == 400


@pytest.mark.unit
class TestDiagramEndpoints:
    """Test suite for diagram endpoints."""

    def _diagram(self, **overrides):
        return {
            "id": "d1", "name": "States", "viewpointId": "sysml.state",
            "elementIds": [], "positions": {}, "createdAt": "t", "updatedAt": "t",
            **overrides,
        }

    def test_get_diagrams(self, client, mock_diagram_service):
        mock_diagram_service.fetch_diagrams.return_value = [self._diagram()]

        response = client.get("/api/sysml/diagrams", params={"viewpoint": "sysml.state"})

        assert response.status_code == 200
        assert response.json()[0]["id"] == "d1"
        mock_diagram_service.fetch_diagrams.assert_called_once_with("sysml.state")

    def test_get_missing_diagram_is_404(self, client, mock_diagram_service):
        mock_diagram_service.fetch_diagram.return_value = None

        response = client.get("/api/sysml/diagrams/missing")

        assert response.status_code == 404

    def test_create_diagram(self, client, mock_diagram_service):
        mock_diagram_service.create_diagram.return_value = self._diagram(elementIds=["a"])

        response = client.post(
            "/api/sysml/diagrams",
            json={"name": "States", "viewpointId": "sysml.state", "elementIds": ["a"]},
        )

        assert response.status_code == 201
        assert response.json()["elementIds"] == ["a"]

    def test_add_elements_to_missing_diagram_is_404(self, client, mock_diagram_service):
        mock_diagram_service.add_elements_to_diagram.side_effect = DiagramNotFoundError("missing")

        response = client.post("/api/sysml/diagrams/missing/elements", json={"elementIds": ["a"]})

        assert response.status_code == 404

    def test_bulk_positions(self, client, mock_diagram_service):
        response = client.patch(
            "/api/sysml/diagrams/d1/positions",
            json={"positions": {"a": {"x": 1, "y": 2}}},
        )

        assert response.status_code == 200
        mock_diagram_service.update_diagram_positions.assert_called_once_with("d1", {"a": {"x": 1.0, "y": 2.0}})
