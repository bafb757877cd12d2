#!/usr/bin/env python3
"""Property codec between SysML element specs and flat Neo4j properties.

Neo4j properties only hold scalars (and homogeneous lists of scalars), while a
SysML element spec is an open-ended record with arrays of objects, nested
action references and per-viewpoint layout positions. This module converts
between the two, driven by a single field table (``FIELD_RULES``):

- SCALAR: copied as-is when truthy, omitted otherwise
- JSON: arrays/objects serialized to JSON text under the storage key
- CLEARABLE_JSON: like JSON, but an explicitly empty list writes a null marker
  so that ``SET n += $props`` removes the stored value
- ACTION_REF: either a structured reference (object or array, stored as JSON)
  or a legacy plain-text action (stored as-is)

Omitting a key is meaningful: partial updates are merged with ``SET n += ...``
and must not clobber values the client did not send.

Decoding never fails as a whole. A field whose JSON cannot be parsed is
dropped from the result and reported as a ``DecodeIssue``; every other field
still decodes.
"""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from .kinds import rel_type_to_edge_kind

logger = logging.getLogger(__name__)

# Values Neo4j can store for a flat property (None means "remove on SET +=")
PropertyValue = Union[str, int, float, bool, None]

# Keys describing relationship endpoints; never stored as properties
RELATIONSHIP_ENDPOINT_KEYS = ("type", "source", "target")


class StorageStrategy(str, Enum):
    """How a spec field is laid out as a Neo4j property."""
    REQUIRED = "required"
    SCALAR = "scalar"
    JSON = "json"
    CLEARABLE_JSON = "clearable_json"
    ACTION_REF = "action_ref"


@dataclass(frozen=True)
class FieldRule:
    """One row of the field table."""
    name: str                               # Key in the domain spec
    strategy: StorageStrategy
    storage_key: Optional[str] = None       # Property name in Neo4j, defaults to name
    shape: type = list                      # Container type accepted by JSON rules

    @property
    def key(self) -> str:
        return self.storage_key or self.name


@dataclass(frozen=True)
class DecodeIssue:
    """A stored field that could not be decoded."""
    field: str
    storage_key: str
    error: str


_R = StorageStrategy

FIELD_RULES: tuple[FieldRule, ...] = (
    FieldRule("id", _R.REQUIRED),
    FieldRule("name", _R.REQUIRED),

    # Common textual properties
    FieldRule("stereotype", _R.SCALAR),
    FieldRule("description", _R.SCALAR),
    FieldRule("documentation", _R.SCALAR),
    FieldRule("status", _R.SCALAR),
    FieldRule("text", _R.SCALAR),
    FieldRule("definition", _R.SCALAR),
    FieldRule("interface", _R.SCALAR),
    FieldRule("objectiveRequirement", _R.SCALAR),
    FieldRule("subjectParameter", _R.SCALAR),

    # Structured arrays
    FieldRule("attributes", _R.JSON),
    FieldRule("ports", _R.JSON),
    FieldRule("tags", _R.JSON),
    FieldRule("parameters", _R.JSON),
    FieldRule("preconditions", _R.JSON),
    FieldRule("postconditions", _R.JSON),
    FieldRule("localVariables", _R.JSON),
    FieldRule("actors", _R.JSON),
    FieldRule("includes", _R.JSON),
    FieldRule("includedUseCases", _R.JSON),
    FieldRule("extends", _R.JSON),

    # State-specific
    FieldRule("internalTransitions", _R.CLEARABLE_JSON),
    FieldRule("entryAction", _R.ACTION_REF),
    FieldRule("exitAction", _R.ACTION_REF),
    FieldRule("doActivity", _R.ACTION_REF),

    # Relationship-specific (for edges)
    FieldRule("trigger", _R.SCALAR),
    FieldRule("guard", _R.SCALAR),
    FieldRule("effect", _R.SCALAR),
    FieldRule("rationale", _R.SCALAR),

    # Layout positions keyed by viewpoint id
    FieldRule("positions", _R.JSON, storage_key="layoutPositions", shape=dict),
)

RECOGNIZED_FIELDS = frozenset(rule.name for rule in FIELD_RULES)
RECOGNIZED_STORAGE_KEYS = frozenset(rule.key for rule in FIELD_RULES)

# Bookkeeping properties written by the services, not part of any spec
SERVICE_MANAGED_KEYS = frozenset({"createdAt", "updatedAt"})


def _encode_field(rule: FieldRule, spec: dict[str, Any], props: dict[str, PropertyValue]) -> None:
    """Write one field of spec into props according to its rule."""
    if rule.strategy == StorageStrategy.REQUIRED:
        props[rule.key] = spec.get(rule.name)
        return

    if rule.name not in spec:
        return
    value = spec[rule.name]

    if rule.strategy == StorageStrategy.SCALAR:
        if value:
            props[rule.key] = value

    elif rule.strategy == StorageStrategy.JSON:
        if isinstance(value, tuple) and rule.shape is list:
            value = list(value)
        if isinstance(value, rule.shape):
            props[rule.key] = json.dumps(value)

    elif rule.strategy == StorageStrategy.CLEARABLE_JSON:
        # set / clear; a missing key (handled above) leaves the stored value untouched
        if isinstance(value, (list, tuple)) and len(value) > 0:
            props[rule.key] = json.dumps(list(value))
        elif value is None or isinstance(value, (list, tuple)):
            props[rule.key] = None

    elif rule.strategy == StorageStrategy.ACTION_REF:
        if isinstance(value, tuple):
            value = list(value)
        if isinstance(value, (dict, list)):
            props[rule.key] = json.dumps(value)
        else:
            props[rule.key] = value or None


def encode_properties(spec: dict[str, Any]) -> dict[str, PropertyValue]:
    """Map a SysML element spec to Neo4j node properties.

    ``id`` and ``name`` are copied unconditionally. Optional fields absent from
    the spec are omitted from the result, so the output is also suitable as a
    partial-update payload for ``SET n += $properties``.

    Args:
        spec: Element spec (or partial update) as received from a client

    Returns:
        Flat property mapping with structured values as JSON text
    """
    props: dict[str, PropertyValue] = {}
    for rule in FIELD_RULES:
        _encode_field(rule, spec, props)
    return props


def _parse_json(rule: FieldRule, raw: Any, issues: list[DecodeIssue]) -> tuple[bool, Any]:
    try:
        return True, json.loads(raw)
    except (TypeError, ValueError) as e:
        logger.warning(
            f"Failed to parse {rule.name} JSON from property {rule.key}: {e}",
            extra={"field": rule.name},
        )
        issues.append(DecodeIssue(field=rule.name, storage_key=rule.key, error=str(e)))
        return False, None


def _decode_field(rule: FieldRule, properties: dict[str, Any], spec: dict[str, Any],
                  issues: list[DecodeIssue]) -> None:
    """Read one field out of properties into spec according to its rule."""
    raw = properties.get(rule.key)

    if rule.strategy == StorageStrategy.REQUIRED:
        spec[rule.name] = raw
        return

    if not raw:
        return

    if rule.strategy == StorageStrategy.SCALAR:
        spec[rule.name] = raw

    elif rule.strategy in (StorageStrategy.JSON, StorageStrategy.CLEARABLE_JSON):
        ok, value = _parse_json(rule, raw, issues)
        if ok:
            spec[rule.name] = value

    elif rule.strategy == StorageStrategy.ACTION_REF:
        # Plain-text actions predate structured references; keep them as text
        try:
            value = json.loads(raw)
        except (TypeError, ValueError):
            value = None
        spec[rule.name] = value if isinstance(value, (dict, list)) else raw


def decode_properties_with_diagnostics(properties: dict[str, Any]) -> tuple[dict[str, Any], list[DecodeIssue]]:
    """Map Neo4j node properties back to a SysML element spec.

    Args:
        properties: Flat property mapping as returned by ``properties(n)``

    Returns:
        Tuple of (spec, issues). ``issues`` lists every field that was dropped
        because its stored JSON could not be parsed; it is empty for a clean decode.
    """
    spec: dict[str, Any] = {}
    issues: list[DecodeIssue] = []
    for rule in FIELD_RULES:
        _decode_field(rule, properties, spec, issues)
    return spec, issues


def decode_properties(properties: dict[str, Any]) -> dict[str, Any]:
    """Map Neo4j node properties back to a SysML element spec.

    Corrupt JSON fields are logged and skipped; see
    ``decode_properties_with_diagnostics`` to receive them.
    """
    spec, _ = decode_properties_with_diagnostics(properties)
    return spec


def _is_scalar(value: Any) -> bool:
    return isinstance(value, (str, int, float, bool))


def encode_relationship_properties(rel_spec: dict[str, Any]) -> dict[str, PropertyValue]:
    """Map a relationship spec to Neo4j relationship properties.

    The relationship type, source and target are expressed by the graph
    structure itself and are not stored. ``label`` and any extra scalar
    properties are passed through; an extra set to None is kept as the null
    marker so a partial update removes it. Other non-scalar extras are dropped.
    """
    props = encode_properties(rel_spec)
    for key in ("id", "name"):
        if props.get(key) is None:
            props.pop(key)

    for key, value in rel_spec.items():
        if key in RECOGNIZED_FIELDS or key in RELATIONSHIP_ENDPOINT_KEYS:
            continue
        if value is None or _is_scalar(value):
            props[key] = value
        else:
            logger.debug(f"Dropping non-scalar relationship property {key}")

    return props


def decode_relationship(rel_type: str, source: str, target: str, properties: dict[str, Any]) -> dict[str, Any]:
    """Rebuild a relationship spec from a stored relationship.

    Args:
        rel_type: Neo4j relationship type (e.g. 'CONTROL_FLOW')
        source: id of the source element
        target: id of the target element
        properties: Stored relationship properties

    Returns:
        Relationship spec with ``id``, ``type``, ``source``, ``target``, ``label``,
        the decoded recognized fields and any extra scalar properties
    """
    kind = rel_type_to_edge_kind(rel_type)
    extras = {
        key: value
        for key, value in properties.items()
        if key not in RECOGNIZED_STORAGE_KEYS and key not in SERVICE_MANAGED_KEYS
    }
    decoded = {k: v for k, v in decode_properties(properties).items() if v is not None}
    return {
        **extras,
        **decoded,
        "id": properties.get("id") or f"{source}-{kind}-{target}",
        "type": kind,
        "source": source,
        "target": target,
        "label": properties.get("label"),
    }
