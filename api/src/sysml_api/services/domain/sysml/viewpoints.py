#!/usr/bin/env python3
"""SysML v2 viewpoint catalog.

A viewpoint is a fixed filter naming the node kinds and edge kinds relevant
to one engineering concern. The catalog is built at import time and never
mutated: entries are frozen dataclasses holding tuples, and ``to_dict`` hands
out fresh copies for serialization.
"""

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class Viewpoint:
    """A named selection of node and edge kinds."""
    id: str
    name: str
    description: str
    include_node_kinds: tuple[str, ...]
    include_edge_kinds: Optional[tuple[str, ...]] = None

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready snapshot using the client's camelCase field names."""
        data = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "includeNodeKinds": list(self.include_node_kinds),
        }
        if self.include_edge_kinds is not None:
            data["includeEdgeKinds"] = list(self.include_edge_kinds)
        return data


STRUCTURAL_DEFINITION = Viewpoint(
    id="sysml.structuralDefinition",
    name="Structural Definition Viewpoint",
    description=(
        "Focuses on part/action/port/item definitions and the specialization "
        "chains that tie them together."
    ),
    include_node_kinds=(
        "part-definition",
        "part-usage",  # composition targets are part usages in SysML v2
        "action-definition",
        "port-definition",
        "item-definition",
        "attribute-definition",
        "connection-definition",
        "constraint-definition",
        "calculation-definition",
    ),
    include_edge_kinds=(
        "specialization", "definition", "dependency", "flow-connection", "composition", "aggregation",
    ),
)

USAGE_STRUCTURE = Viewpoint(
    id="sysml.usageStructure",
    name="Usage Structure Viewpoint",
    description="Shows part, port, action, and item usages mapped back to their definitions.",
    include_node_kinds=("part-usage", "port-usage", "action-usage", "item-usage"),
    include_edge_kinds=(
        "definition", "dependency", "allocate", "action-flow", "flow-connection", "composition", "aggregation",
    ),
)

BEHAVIOR_CONTROL = Viewpoint(
    id="sysml.behaviorControl",
    name="Behavior & Control Viewpoint",
    description=(
        "Captures actions and control nodes with succession (temporal ordering), action flows, "
        "item flows, and their definitions as specified in SysML v2."
    ),
    include_node_kinds=("action-definition", "action-usage", "activity-control", "perform-action"),
    include_edge_kinds=(
        "definition",
        "succession",           # temporal ordering
        "succession-as-usage",
        "action-flow",
        "item-flow",
        "dependency",
    ),
)

INTERACTION = Viewpoint(
    id="sysml.interaction",
    name="Interaction Viewpoint",
    description="Sequence lifelines and messages for interaction scenarios.",
    include_node_kinds=("sequence-lifeline",),
    include_edge_kinds=("message",),
)

STATE = Viewpoint(
    id="sysml.state",
    name="State Viewpoint",
    description="State machines, state definitions/usages, transitions, and actions.",
    include_node_kinds=("state-machine", "state-definition", "state-usage", "action-definition", "action-usage"),
    include_edge_kinds=("transition", "composition", "aggregation", "definition"),
)

REQUIREMENT = Viewpoint(
    id="sysml.requirement",
    name="Requirement Viewpoint",
    description="Requirement definitions and usages with satisfy/refine/verify relationships.",
    include_node_kinds=("requirement-definition", "requirement-usage"),
    include_edge_kinds=("satisfy", "refine", "verify", "dependency"),
)

USE_CASE = Viewpoint(
    id="sysml.useCase",
    name="Use Case Viewpoint",
    description=(
        "Use case definitions and usages with actors, includes, and extends relationships "
        "as described in SysML v2."
    ),
    include_node_kinds=("use-case-definition", "use-case-usage"),
    include_edge_kinds=("include", "extend", "dependency", "definition"),
)

ALL_VIEWPOINTS: tuple[Viewpoint, ...] = (
    STRUCTURAL_DEFINITION,
    USAGE_STRUCTURE,
    BEHAVIOR_CONTROL,
    INTERACTION,
    STATE,
    REQUIREMENT,
    USE_CASE,
)

_KNOWN_NODE_KINDS = frozenset(kind for vp in ALL_VIEWPOINTS for kind in vp.include_node_kinds)
_KNOWN_EDGE_KINDS = frozenset(kind for vp in ALL_VIEWPOINTS for kind in (vp.include_edge_kinds or ()))


def get_viewpoint_by_id(viewpoint_id: str) -> Optional[Viewpoint]:
    """Look up a viewpoint; returns None when the id is unknown."""
    for viewpoint in ALL_VIEWPOINTS:
        if viewpoint.id == viewpoint_id:
            return viewpoint
    return None


def get_available_types_for_viewpoint(viewpoint_id: str) -> dict[str, list[str]]:
    """Node and edge kinds that can be shown or created in a viewpoint.

    Unknown ids yield empty lists, same as a viewpoint with nothing to show.
    """
    viewpoint = get_viewpoint_by_id(viewpoint_id)
    if viewpoint is None:
        return {"nodeKinds": [], "edgeKinds": []}

    return {
        "nodeKinds": list(viewpoint.include_node_kinds),
        "edgeKinds": list(viewpoint.include_edge_kinds or ()),
    }


def is_known_node_kind(kind: str) -> bool:
    """True if any viewpoint includes this node kind."""
    return kind in _KNOWN_NODE_KINDS


def is_known_edge_kind(kind: str) -> bool:
    """True if any viewpoint includes this edge kind."""
    return kind in _KNOWN_EDGE_KINDS
