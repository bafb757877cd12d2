#!/usr/bin/env python3
"""Translation between SysML kind identifiers and Neo4j naming conventions.

SysML element and relationship kinds are kebab-case strings
(``part-definition``, ``control-flow``). In the graph they become:

- node labels in PascalCase: ``part-definition`` -> ``PartDefinition``
- relationship types in SCREAMING_SNAKE_CASE: ``control-flow`` -> ``CONTROL_FLOW``

All functions are pure. Input must already follow the source convention;
malformed input produces an unchecked string rather than an error, so callers
should restrict kinds to those listed in the viewpoint catalog first.
"""

import re
from enum import Enum
from typing import Optional

# Generic label carried by every SysML node
BASE_LABEL = "SysMLElement"

DEFINITION_SUFFIX = "-definition"
USAGE_SUFFIX = "-usage"

_UPPERCASE = re.compile(r"([A-Z])")


class ElementKind(str, Enum):
    """Definition/usage classification of a node kind."""
    DEFINITION = "definition"
    USAGE = "usage"


def kind_to_label(kind: str) -> str:
    """Convert a node kind to its Neo4j label ('part-definition' -> 'PartDefinition')."""
    return "".join(word[:1].upper() + word[1:] for word in kind.split("-"))


def label_to_node_kind(label: str) -> str:
    """Convert a Neo4j label back to a node kind ('PartDefinition' -> 'part-definition')."""
    return _UPPERCASE.sub(r"-\1", label).lower()[1:]


def edge_kind_to_rel_type(kind: str) -> str:
    """Convert an edge kind to a relationship type ('control-flow' -> 'CONTROL_FLOW')."""
    return kind.replace("-", "_").upper()


def rel_type_to_edge_kind(rel_type: str) -> str:
    """Convert a relationship type back to an edge kind ('CONTROL_FLOW' -> 'control-flow')."""
    return rel_type.replace("_", "-").lower()


def get_node_labels(kind: str) -> list[str]:
    """Labels for a node of the given kind: the base label plus the specific one."""
    return [BASE_LABEL, kind_to_label(kind)]


def get_specific_label(labels) -> Optional[str]:
    """Pick the kind-specific label out of a node's label set."""
    for label in labels:
        if label != BASE_LABEL:
            return label
    return None


def get_element_kind(kind: str) -> Optional[ElementKind]:
    """Classify a node kind as a definition or usage by suffix.

    Returns:
        ElementKind.DEFINITION, ElementKind.USAGE, or None for kinds such as
        'transition' or 'state-machine' that are neither.
    """
    if kind.endswith(DEFINITION_SUFFIX):
        return ElementKind.DEFINITION
    if kind.endswith(USAGE_SUFFIX):
        return ElementKind.USAGE
    return None
