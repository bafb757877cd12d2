#!/usr/bin/env python3
"""
SysML Model Service

Reads and writes SysML elements and relationships in Neo4j.

Elements are nodes labelled ``:SysMLElement:<KindLabel>``; relationships are
typed edges between them. All property (de)serialization goes through the
domain codec, so this service never handles raw JSON text for spec fields.
"""

import json
import logging
from typing import Any, Optional

from ..clients.neo4j_client import Neo4jClient
from .domain.sysml import (
    decode_properties,
    decode_relationship,
    edge_kind_to_rel_type,
    encode_properties,
    encode_relationship_properties,
    get_node_labels,
    get_viewpoint_by_id,
    kind_to_label,
    label_to_node_kind,
)
from .domain.sysml.kinds import get_specific_label
from ..utils.time_utils import now_iso, now_millis
from .errors import (
    CompositionError,
    ElementNotFoundError,
    RelationshipEndpointError,
    RelationshipNotFoundError,
)

logger = logging.getLogger(__name__)

# Usages that inherit parameters from their definition
PARAMETER_INHERITING_KINDS = ("action-usage", "calculation-usage")

# Kinds whose parameters are rendered as input/output compartments
COMPARTMENT_KINDS = ("action-definition", "action-usage", "calculation-usage")

NODES_QUERY = """
MATCH (n:SysMLElement)
{node_filter}
OPTIONAL MATCH (n)-[compRel:COMPOSITION|AGGREGATION]->(partUsage:PartUsage)-[:DEFINITION]->(partDef:SysMLElement)
WITH n, collect(CASE WHEN partUsage IS NULL THEN NULL ELSE {{
    id: partUsage.id,
    name: partUsage.name,
    definitionId: partDef.id,
    definitionName: partDef.name,
    multiplicity: partUsage.multiplicity,
    relationshipType: type(compRel)
}} END) AS ownedParts
OPTIONAL MATCH (n)-[stateRel:COMPOSITION|AGGREGATION]->(stateUsage:StateUsage)-[:DEFINITION]->(stateDef:SysMLElement)
WHERE 'StateMachine' IN labels(n)
WITH n, ownedParts, collect(CASE WHEN stateUsage IS NULL THEN NULL ELSE {{
    id: stateUsage.id,
    name: stateUsage.name,
    definitionId: stateDef.id,
    definitionName: stateDef.name,
    relationshipType: type(stateRel)
}} END) AS ownedStates
OPTIONAL MATCH (n)-[:DEFINITION]->(def:SysMLElement)
WHERE 'ActionUsage' IN labels(n) OR 'CalculationUsage' IN labels(n)
WITH n, ownedParts, ownedStates, head(collect(def.parameters)) AS definitionParameters
RETURN labels(n) AS labels,
       properties(n) AS properties,
       ownedParts,
       ownedStates,
       definitionParameters
"""

RELATIONSHIPS_QUERY = """
MATCH (source:SysMLElement)-[r]->(target:SysMLElement)
{rel_filter}
RETURN type(r) AS type, source.id AS source, target.id AS target, properties(r) AS properties
"""


def _label_clause(labels: list[str]) -> str:
    return "".join(f":`{label}`" for label in labels)


def parameters_to_compartments(parameters: Optional[list[dict[str, Any]]]) -> Optional[list[dict[str, Any]]]:
    """Group action parameters into 'inputs' and 'outputs' display compartments.

    'inout' parameters appear in both. Returns None when there is nothing to show.
    """
    if not parameters:
        return None

    def _items(params):
        return [
            {
                "label": p.get("name"),
                "value": p.get("type") or "",
                "emphasis": False if p.get("inherited") else None,
                "inherited": bool(p.get("inherited", False)),
            }
            for p in params
        ]

    parameters = [p for p in parameters if isinstance(p, dict)]
    inputs = [p for p in parameters if p.get("direction") in ("in", "inout")]
    outputs = [p for p in parameters if p.get("direction") in ("out", "inout")]

    compartments = []
    if inputs:
        compartments.append({"title": "inputs", "items": _items(inputs)})
    if outputs:
        compartments.append({"title": "outputs", "items": _items(outputs)})

    return compartments or None


def merge_inherited_parameters(inherited: list[dict[str, Any]], local: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Combine a definition's parameters with a usage's own.

    Local parameters override inherited ones with the same name. Inherited
    parameters come first; every entry is tagged with ``inherited``. Entries
    that are not objects are skipped.
    """
    inherited = [p for p in inherited if isinstance(p, dict)]
    local = [p for p in local if isinstance(p, dict)]
    local_names = {p.get("name") for p in local}
    return [
        *({**p, "inherited": True} for p in inherited if p.get("name") not in local_names),
        *({**p, "inherited": False} for p in local),
    ]


class ModelService:
    """
    Service for SysML elements and relationships stored in Neo4j.

    The service owns existence checks, timestamps and cascade deletes;
    property layout is delegated to the domain codec.
    """

    def __init__(self, neo4j_client: Neo4jClient):
        """
        Initialize model service.

        Args:
            neo4j_client: Neo4j client for database operations
        """
        self.neo4j_client = neo4j_client

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def fetch_model(self, viewpoint_id: str | None = None) -> dict[str, list[dict[str, Any]]]:
        """
        Fetch all SysML elements and relationships, optionally filtered by viewpoint.

        Args:
            viewpoint_id: Viewpoint to restrict node labels and relationship types to.
                An unknown id is logged and treated as no filter.

        Returns:
            Dictionary with ``nodes`` (list of {kind, spec}) and ``relationships``
        """
        viewpoint = get_viewpoint_by_id(viewpoint_id) if viewpoint_id else None
        if viewpoint_id and viewpoint is None:
            logger.warning(f"Unknown viewpoint {viewpoint_id}, returning unfiltered model",
                           extra={"viewpoint_id": viewpoint_id})

        node_filter = ""
        rel_filter = ""
        parameters: dict[str, Any] = {}

        if viewpoint and viewpoint.include_node_kinds:
            node_filter = "WHERE any(label IN labels(n) WHERE label IN $nodeLabels)"
            parameters["nodeLabels"] = [kind_to_label(kind) for kind in viewpoint.include_node_kinds]

        if viewpoint and viewpoint.include_edge_kinds:
            rel_filter = "WHERE type(r) IN $relTypes"
            parameters["relTypes"] = [edge_kind_to_rel_type(kind) for kind in viewpoint.include_edge_kinds]

        node_rows = self.neo4j_client.query(NODES_QUERY.format(node_filter=node_filter), parameters)
        rel_rows = self.neo4j_client.query(RELATIONSHIPS_QUERY.format(rel_filter=rel_filter), parameters)

        nodes = [node for node in (self._row_to_node(row) for row in node_rows) if node is not None]
        relationships = [
            decode_relationship(row["type"], row["source"], row["target"], row.get("properties") or {})
            for row in rel_rows
            if row.get("type") is not None
        ]

        logger.debug(f"Fetched model with {len(nodes)} nodes and {len(relationships)} relationships")
        return {"nodes": nodes, "relationships": relationships}

    def _row_to_node(self, row: dict[str, Any]) -> Optional[dict[str, Any]]:
        """Turn one row of NODES_QUERY into a {kind, spec} node."""
        specific_label = get_specific_label(row.get("labels") or [])
        if specific_label is None:
            logger.warning(f"Skipping SysML node without a kind label: {row.get('properties', {}).get('id')}")
            return None

        kind = label_to_node_kind(specific_label)
        spec = decode_properties(row.get("properties") or {})

        if row.get("ownedParts"):
            spec["parts"] = row["ownedParts"]

        if row.get("ownedStates"):
            spec["states"] = row["ownedStates"]

        if "parameters" in spec and not isinstance(spec["parameters"], list):
            logger.warning(f"Ignoring parameters of {spec.get('id')}: not a list",
                           extra={"element_id": spec.get("id"), "field": "parameters"})
            del spec["parameters"]

        definition_parameters = row.get("definitionParameters")
        if kind in PARAMETER_INHERITING_KINDS and definition_parameters:
            try:
                inherited = json.loads(definition_parameters)
                if not isinstance(inherited, list):
                    raise ValueError(f"expected a list, got {type(inherited).__name__}")
            except (TypeError, ValueError) as e:
                logger.warning(f"Failed to parse definition parameters for {spec.get('id')}: {e}",
                               extra={"element_id": spec.get("id")})
            else:
                spec["parameters"] = merge_inherited_parameters(inherited, spec.get("parameters") or [])

        if kind in COMPARTMENT_KINDS and spec.get("parameters"):
            spec["compartments"] = parameters_to_compartments(spec["parameters"])

        return {"kind": kind, "spec": spec}

    # ------------------------------------------------------------------
    # Elements
    # ------------------------------------------------------------------

    def create_element(self, kind: str, spec: dict[str, Any]) -> None:
        """
        Create a new SysML element node.

        Args:
            kind: Node kind, e.g. 'part-definition'
            spec: Element spec; must contain ``id`` and ``name``
        """
        properties = encode_properties(spec)
        now = now_iso()
        properties["createdAt"] = now
        properties["updatedAt"] = now

        query = f"""
        CREATE (n{_label_clause(get_node_labels(kind))})
        SET n = $properties
        RETURN n.id AS id
        """
        self.neo4j_client.query(query, {"properties": properties})
        logger.info(f"Created {kind} element {spec.get('id')}", extra={"element_id": spec.get("id")})

    def update_element(self, element_id: str, updates: dict[str, Any]) -> None:
        """
        Merge a partial update into an existing element.

        Fields absent from ``updates`` are left untouched; fields encoded as
        null (e.g. an emptied internalTransitions list) are removed.

        Raises:
            ElementNotFoundError: If no element has the given id
        """
        properties = encode_properties(updates)
        properties.pop("id", None)
        if properties.get("name") is None:
            properties.pop("name", None)
        properties["updatedAt"] = now_iso()

        query = """
        MATCH (n:SysMLElement {id: $id})
        SET n += $properties
        RETURN n.id AS id
        """
        results = self.neo4j_client.query(query, {"id": element_id, "properties": properties})

        if not results:
            raise ElementNotFoundError(element_id)
        logger.info(f"Updated element {element_id}", extra={"element_id": element_id})

    def delete_element(self, element_id: str) -> None:
        """Delete an element and all its relationships."""
        query = """
        MATCH (n:SysMLElement {id: $id})
        DETACH DELETE n
        """
        self.neo4j_client.query(query, {"id": element_id})
        logger.info(f"Deleted element {element_id}", extra={"element_id": element_id})

    def update_element_position(self, element_id: str, viewpoint_id: str, position: dict[str, float]) -> None:
        """
        Store an element's layout position for one viewpoint.

        Positions for other viewpoints are preserved.

        Raises:
            ElementNotFoundError: If no element has the given id
        """
        results = self.neo4j_client.query(
            "MATCH (n:SysMLElement {id: $id}) RETURN n.layoutPositions AS layoutPositions",
            {"id": element_id},
        )
        if not results:
            raise ElementNotFoundError(element_id)

        stored = decode_properties({"layoutPositions": results[0].get("layoutPositions")})
        positions = stored.get("positions")
        if not isinstance(positions, dict):
            positions = {}
        positions[viewpoint_id] = {"x": position["x"], "y": position["y"]}

        query = """
        MATCH (n:SysMLElement {id: $id})
        SET n.layoutPositions = $layoutPositions
        RETURN n.id AS id
        """
        self.neo4j_client.query(query, {
            "id": element_id,
            "layoutPositions": encode_properties({"positions": positions})["layoutPositions"],
        })

    # ------------------------------------------------------------------
    # Relationships
    # ------------------------------------------------------------------

    def create_relationship(self, relationship_spec: dict[str, Any]) -> None:
        """
        Create a typed relationship between two existing elements.

        Args:
            relationship_spec: {id, type, source, target, label?, ...extra scalars}

        Raises:
            RelationshipEndpointError: If source or target does not exist
        """
        rel_type = edge_kind_to_rel_type(relationship_spec["type"])
        properties = encode_relationship_properties(relationship_spec)
        now = now_iso()
        properties["createdAt"] = now
        properties["updatedAt"] = now

        query = f"""
        MATCH (source:SysMLElement {{id: $sourceId}})
        MATCH (target:SysMLElement {{id: $targetId}})
        CREATE (source)-[r:`{rel_type}`]->(target)
        SET r = $properties
        RETURN r.id AS id
        """
        results = self.neo4j_client.query(query, {
            "sourceId": relationship_spec["source"],
            "targetId": relationship_spec["target"],
            "properties": properties,
        })

        if not results:
            raise RelationshipEndpointError(relationship_spec["source"], relationship_spec["target"])
        logger.info(f"Created {rel_type} relationship {relationship_spec.get('id')}")

    def update_relationship(self, relationship_id: str, updates: dict[str, Any]) -> None:
        """
        Merge a partial update into an existing relationship.

        Raises:
            RelationshipNotFoundError: If no relationship has the given id
        """
        properties = encode_relationship_properties(updates)
        properties.pop("id", None)
        properties["updatedAt"] = now_iso()

        query = """
        MATCH ()-[r {id: $id}]->()
        SET r += $properties
        RETURN r.id AS id
        """
        results = self.neo4j_client.query(query, {"id": relationship_id, "properties": properties})

        if not results:
            raise RelationshipNotFoundError(relationship_id)

    def delete_relationship(self, relationship_id: str) -> None:
        """Delete a relationship by id."""
        query = """
        MATCH ()-[r {id: $id}]->()
        DELETE r
        """
        self.neo4j_client.query(query, {"id": relationship_id})

    # ------------------------------------------------------------------
    # SysML v2 ownership through intermediate usages
    # ------------------------------------------------------------------

    def create_composition(self, source_id: str, target_id: str, part_name: str,
                           composition_type: str = "composition") -> dict[str, str]:
        """
        Compose a definition into an owner through a new part-usage.

        Creates ``(source)-[:COMPOSITION|AGGREGATION]->(partUsage)-[:DEFINITION]->(target)``
        in a single statement.

        Args:
            source_id: Owning element
            target_id: Definition the new part is typed by
            part_name: Name of the new part-usage
            composition_type: 'composition' or 'aggregation'

        Returns:
            Dictionary with partUsageId, definitionRelId and compositionRelId

        Raises:
            CompositionError: If source or target does not exist
        """
        if composition_type not in ("composition", "aggregation"):
            raise CompositionError(f"Unsupported composition type: {composition_type}")

        part_usage_id = f"{source_id}-part-{now_millis()}"
        definition_rel_id = f"{part_usage_id}-definition-{target_id}"
        composition_rel_id = f"{source_id}-{composition_type}-{part_usage_id}"
        rel_type = edge_kind_to_rel_type(composition_type)

        query = f"""
        MATCH (source:SysMLElement {{id: $sourceId}})
        MATCH (target:SysMLElement {{id: $targetId}})
        CREATE (partUsage:SysMLElement:PartUsage {{
            id: $partUsageId, name: $partName, createdAt: $now, updatedAt: $now
        }})
        CREATE (partUsage)-[defRel:DEFINITION {{
            id: $definitionRelId, createdAt: $now, updatedAt: $now
        }}]->(target)
        CREATE (source)-[compRel:{rel_type} {{
            id: $compositionRelId, createdAt: $now, updatedAt: $now
        }}]->(partUsage)
        RETURN partUsage.id AS partUsageId
        """
        results = self.neo4j_client.query(query, {
            "sourceId": source_id,
            "targetId": target_id,
            "partUsageId": part_usage_id,
            "partName": part_name,
            "definitionRelId": definition_rel_id,
            "compositionRelId": composition_rel_id,
            "now": now_iso(),
        })

        if not results:
            raise CompositionError("Failed to create composition. Source or target not found.")

        return {
            "partUsageId": part_usage_id,
            "definitionRelId": definition_rel_id,
            "compositionRelId": composition_rel_id,
        }

    def delete_composition(self, part_usage_id: str) -> None:
        """Remove a composition by deleting its intermediate part-usage."""
        query = """
        MATCH (partUsage:SysMLElement:PartUsage {id: $partUsageId})
        DETACH DELETE partUsage
        """
        self.neo4j_client.query(query, {"partUsageId": part_usage_id})

    def create_state_in_state_machine(self, state_machine_id: str, state_definition_id: str,
                                      state_name: str) -> dict[str, str]:
        """
        Add a state to a state machine through a new state-usage.

        Creates ``(stateMachine)-[:COMPOSITION]->(stateUsage)-[:DEFINITION]->(stateDefinition)``.

        Raises:
            CompositionError: If the state machine or state definition does not exist
        """
        state_usage_id = f"{state_machine_id}-state-{now_millis()}"
        definition_rel_id = f"{state_usage_id}-definition-{state_definition_id}"
        composition_rel_id = f"{state_machine_id}-composition-{state_usage_id}"

        query = """
        MATCH (stateMachine:SysMLElement {id: $stateMachineId})
        MATCH (stateDef:SysMLElement {id: $stateDefinitionId})
        CREATE (stateUsage:SysMLElement:StateUsage {
            id: $stateUsageId, name: $stateName, createdAt: $now, updatedAt: $now
        })
        CREATE (stateUsage)-[defRel:DEFINITION {
            id: $definitionRelId, createdAt: $now, updatedAt: $now
        }]->(stateDef)
        CREATE (stateMachine)-[compRel:COMPOSITION {
            id: $compositionRelId, createdAt: $now, updatedAt: $now
        }]->(stateUsage)
        RETURN stateUsage.id AS stateUsageId
        """
        results = self.neo4j_client.query(query, {
            "stateMachineId": state_machine_id,
            "stateDefinitionId": state_definition_id,
            "stateUsageId": state_usage_id,
            "stateName": state_name,
            "definitionRelId": definition_rel_id,
            "compositionRelId": composition_rel_id,
            "now": now_iso(),
        })

        if not results:
            raise CompositionError(
                "Failed to create state in state machine. State machine or state definition not found."
            )

        return {
            "stateUsageId": state_usage_id,
            "definitionRelId": definition_rel_id,
            "compositionRelId": composition_rel_id,
        }

    def delete_state_from_state_machine(self, state_usage_id: str) -> None:
        """Remove a state from its state machine by deleting the state-usage."""
        query = """
        MATCH (stateUsage:SysMLElement:StateUsage {id: $stateUsageId})
        DETACH DELETE stateUsage
        """
        self.neo4j_client.query(query, {"stateUsageId": state_usage_id})
