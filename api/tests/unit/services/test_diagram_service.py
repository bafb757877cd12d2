#!/usr/bin/env python3

import json

import pytest

from sysml_api.services.diagram_service import DEFAULT_DIAGRAM_NAME, DiagramService, properties_to_diagram
from sysml_api.services.errors import DiagramNotFoundError
from tests.fixtures.sysml_fixtures import create_diagram_properties, create_mock_neo4j_client


@pytest.mark.unit
class TestDiagramReads:
    """Test suite for reading diagrams"""

    def test_properties_to_diagram(self):
        diagram = properties_to_diagram(create_diagram_properties(
            element_ids=["a", "b"], positions={"a": {"x": 1, "y": 2}},
        ))

        assert diagram["elementIds"] == ["a", "b"]
        assert diagram["positions"] == {"a": {"x": 1, "y": 2}}
        assert diagram["viewpointId"] == "sysml.state"

    def test_properties_to_diagram_tolerates_corrupt_json(self):
        properties = create_diagram_properties()
        properties["elementIds"] = "[broken"

        diagram = properties_to_diagram(properties)

        assert diagram["elementIds"] == []
        assert diagram["positions"] == {}

    def test_fetch_diagrams_filters_by_viewpoint(self):
        client = create_mock_neo4j_client([[{"properties": create_diagram_properties()}]])

        diagrams = DiagramService(client).fetch_diagrams("sysml.state")

        query, params = client.query.call_args[0]
        assert "WHERE d.viewpointId = $viewpointId" in query
        assert "ORDER BY d.updatedAt DESC" in query
        assert params == {"viewpointId": "sysml.state"}
        assert diagrams[0]["id"] == "diagram-1"

    def test_fetch_diagrams_without_viewpoint(self):
        client = create_mock_neo4j_client([[]])

        assert DiagramService(client).fetch_diagrams() == []
        query, _ = client.query.call_args[0]
        assert "WHERE" not in query

    def test_fetch_diagram_missing_returns_none(self):
        client = create_mock_neo4j_client([[]])
        assert DiagramService(client).fetch_diagram("missing") is None


@pytest.mark.unit
class TestDiagramWrites:
    """Test suite for creating and editing diagrams"""

    def test_create_diagram_applies_defaults(self):
        client = create_mock_neo4j_client()
        client.query.side_effect = lambda query, params: [{"properties": params["properties"]}]

        diagram = DiagramService(client).create_diagram({})

        assert diagram["id"].startswith("diagram-")
        assert diagram["name"] == DEFAULT_DIAGRAM_NAME
        assert diagram["elementIds"] == []
        assert diagram["positions"] == {}
        assert diagram["createdAt"] == diagram["updatedAt"]

    def test_create_diagram_keeps_given_values(self):
        client = create_mock_neo4j_client()
        client.query.side_effect = lambda query, params: [{"properties": params["properties"]}]

        diagram = DiagramService(client).create_diagram({
            "id": "d1", "name": "Structure", "viewpointId": "sysml.structuralDefinition", "elementIds": ["a"],
        })

        assert diagram["id"] == "d1"
        assert diagram["name"] == "Structure"
        assert diagram["elementIds"] == ["a"]

    def test_update_diagram_only_sends_metadata(self):
        client = create_mock_neo4j_client([[{"id": "d1"}]])

        DiagramService(client).update_diagram("d1", {"name": "Renamed", "elementIds": ["x"]})

        _, params = client.query.call_args[0]
        assert params["properties"]["name"] == "Renamed"
        assert "elementIds" not in params["properties"]
        assert "updatedAt" in params["properties"]

    def test_update_missing_diagram_raises(self):
        client = create_mock_neo4j_client([[]])

        with pytest.raises(DiagramNotFoundError):
            DiagramService(client).update_diagram("missing", {"name": "x"})

    def test_add_elements_skips_duplicates(self):
        stored = create_diagram_properties(element_ids=["a", "b"])
        client = create_mock_neo4j_client([[{"properties": stored}], [{"id": "diagram-1"}]])

        DiagramService(client).add_elements_to_diagram("diagram-1", ["b", "c", "c"])

        _, params = client.query.call_args[0]
        assert json.loads(params["properties"]["elementIds"]) == ["a", "b", "c"]

    def test_add_elements_to_missing_diagram_raises(self):
        client = create_mock_neo4j_client([[]])

        with pytest.raises(DiagramNotFoundError):
            DiagramService(client).add_elements_to_diagram("missing", ["a"])

    def test_remove_element(self):
        stored = create_diagram_properties(element_ids=["a", "b"])
        client = create_mock_neo4j_client([[{"properties": stored}], [{"id": "diagram-1"}]])

        DiagramService(client).remove_element_from_diagram("diagram-1", "a")

        _, params = client.query.call_args[0]
        assert json.loads(params["properties"]["elementIds"]) == ["b"]

    def test_update_element_position_keeps_others(self):
        stored = create_diagram_properties(positions={"a": {"x": 1, "y": 1}})
        client = create_mock_neo4j_client([[{"properties": stored}], [{"id": "diagram-1"}]])

        DiagramService(client).update_element_position_in_diagram("diagram-1", "b", {"x": 3, "y": 4})

        _, params = client.query.call_args[0]
        assert json.loads(params["properties"]["positions"]) == {
            "a": {"x": 1, "y": 1},
            "b": {"x": 3, "y": 4},
        }

    def test_update_diagram_positions_replaces_all(self):
        client = create_mock_neo4j_client([[{"id": "diagram-1"}]])

        DiagramService(client).update_diagram_positions("diagram-1", {"c": {"x": 0, "y": 0}})

        _, params = client.query.call_args[0]
        assert json.loads(params["properties"]["positions"]) == {"c": {"x": 0, "y": 0}}

    def test_delete_diagram(self):
        client = create_mock_neo4j_client()

        DiagramService(client).delete_diagram("d1")

        query, params = client.query.call_args[0]
        assert "DELETE d" in query
        assert params == {"diagramId": "d1"}
