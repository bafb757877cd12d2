#!/usr/bin/env python3
"""
Diagram Service

Manages saved diagrams stored as ``Diagram`` nodes in Neo4j.

A diagram records which elements were placed in it, for which viewpoint, and
where. ``elementIds`` and ``positions`` are stored as JSON text because Neo4j
properties cannot hold nested maps.
"""

import json
import logging
from typing import Any

from ..clients.neo4j_client import Neo4jClient
from .errors import DiagramNotFoundError
from ..utils.time_utils import now_iso, now_millis

logger = logging.getLogger(__name__)

DEFAULT_DIAGRAM_NAME = "Untitled Diagram"


def _load_json(raw: Any, default: Any, field: str, diagram_id: str) -> Any:
    if not raw:
        return default
    try:
        return json.loads(raw)
    except (TypeError, ValueError) as e:
        logger.warning(f"Failed to parse {field} JSON for diagram {diagram_id}: {e}", extra={"field": field})
        return default


def properties_to_diagram(properties: dict[str, Any]) -> dict[str, Any]:
    """Convert stored Diagram node properties to the API representation."""
    diagram_id = properties.get("id")
    return {
        "id": diagram_id,
        "name": properties.get("name"),
        "viewpointId": properties.get("viewpointId") or "",
        "elementIds": _load_json(properties.get("elementIds"), [], "elementIds", diagram_id),
        "positions": _load_json(properties.get("positions"), {}, "positions", diagram_id),
        "createdAt": properties.get("createdAt"),
        "updatedAt": properties.get("updatedAt"),
    }


class DiagramService:
    """
    Service for SysML diagrams in Neo4j.

    Diagrams reference elements by id only; deleting an element does not
    rewrite the diagrams that mention it.
    """

    def __init__(self, neo4j_client: Neo4jClient):
        """
        Initialize diagram service.

        Args:
            neo4j_client: Neo4j client for database operations
        """
        self.neo4j_client = neo4j_client

    def _properties(self, diagram_id: str) -> dict[str, Any]:
        results = self.neo4j_client.query(
            "MATCH (d:Diagram {id: $diagramId}) RETURN properties(d) AS properties",
            {"diagramId": diagram_id},
        )
        if not results:
            raise DiagramNotFoundError(diagram_id)
        return results[0]["properties"]

    def _set(self, diagram_id: str, properties: dict[str, Any]) -> None:
        properties = {**properties, "updatedAt": now_iso()}
        query = """
        MATCH (d:Diagram {id: $diagramId})
        SET d += $properties
        RETURN d.id AS id
        """
        results = self.neo4j_client.query(query, {"diagramId": diagram_id, "properties": properties})
        if not results:
            raise DiagramNotFoundError(diagram_id)

    def create_diagram(self, spec: dict[str, Any]) -> dict[str, Any]:
        """
        Create a new diagram.

        Args:
            spec: Partial diagram spec; id, name, viewpointId, elementIds and
                positions all have defaults

        Returns:
            The stored diagram
        """
        now = now_iso()
        properties = {
            "id": spec.get("id") or f"diagram-{now_millis()}",
            "name": spec.get("name") or DEFAULT_DIAGRAM_NAME,
            "viewpointId": spec.get("viewpointId") or "",
            "elementIds": json.dumps(spec.get("elementIds") or []),
            "positions": json.dumps(spec.get("positions") or {}),
            "createdAt": now,
            "updatedAt": now,
        }

        query = """
        CREATE (d:Diagram)
        SET d = $properties
        RETURN properties(d) AS properties
        """
        results = self.neo4j_client.query(query, {"properties": properties})
        if not results:
            raise RuntimeError("Failed to create diagram")

        logger.info(f"Created diagram {properties['id']}", extra={"viewpoint_id": properties["viewpointId"]})
        return properties_to_diagram(results[0]["properties"])

    def fetch_diagrams(self, viewpoint_id: str | None = None) -> list[dict[str, Any]]:
        """Fetch all diagrams, most recently updated first, optionally for one viewpoint."""
        where_clause = "WHERE d.viewpointId = $viewpointId" if viewpoint_id else ""
        query = f"""
        MATCH (d:Diagram)
        {where_clause}
        RETURN properties(d) AS properties
        ORDER BY d.updatedAt DESC
        """
        results = self.neo4j_client.query(query, {"viewpointId": viewpoint_id})
        return [properties_to_diagram(row["properties"]) for row in results]

    def fetch_diagram(self, diagram_id: str) -> dict[str, Any] | None:
        """Fetch one diagram, or None if it does not exist."""
        try:
            return properties_to_diagram(self._properties(diagram_id))
        except DiagramNotFoundError:
            return None

    def update_diagram(self, diagram_id: str, updates: dict[str, Any]) -> None:
        """
        Update diagram metadata (name and/or viewpointId).

        Raises:
            DiagramNotFoundError: If the diagram does not exist
        """
        properties = {key: updates[key] for key in ("name", "viewpointId") if updates.get(key) is not None}
        self._set(diagram_id, properties)

    def delete_diagram(self, diagram_id: str) -> None:
        """Delete a diagram. Elements it referenced are not touched."""
        self.neo4j_client.query("MATCH (d:Diagram {id: $diagramId}) DELETE d", {"diagramId": diagram_id})

    def add_elements_to_diagram(self, diagram_id: str, element_ids: list[str]) -> None:
        """
        Append elements to a diagram, skipping ids it already contains.

        Raises:
            DiagramNotFoundError: If the diagram does not exist
        """
        current = properties_to_diagram(self._properties(diagram_id))["elementIds"]
        merged = list(dict.fromkeys([*current, *element_ids]))
        self._set(diagram_id, {"elementIds": json.dumps(merged)})

    def remove_element_from_diagram(self, diagram_id: str, element_id: str) -> None:
        """
        Remove one element from a diagram.

        Raises:
            DiagramNotFoundError: If the diagram does not exist
        """
        current = properties_to_diagram(self._properties(diagram_id))["elementIds"]
        self._set(diagram_id, {"elementIds": json.dumps([e for e in current if e != element_id])})

    def update_element_position_in_diagram(self, diagram_id: str, element_id: str,
                                           position: dict[str, float]) -> None:
        """
        Set one element's position within a diagram.

        Raises:
            DiagramNotFoundError: If the diagram does not exist
        """
        positions = properties_to_diagram(self._properties(diagram_id))["positions"]
        if not isinstance(positions, dict):
            positions = {}
        positions[element_id] = {"x": position["x"], "y": position["y"]}
        self._set(diagram_id, {"positions": json.dumps(positions)})

    def update_diagram_positions(self, diagram_id: str, positions: dict[str, dict[str, float]]) -> None:
        """
        Replace all element positions of a diagram.

        Raises:
            DiagramNotFoundError: If the diagram does not exist
        """
        self._set(diagram_id, {"positions": json.dumps(positions)})
