#!/usr/bin/env python3
"""
Handlers for SysML model operations.

Validate kinds against the viewpoint catalog, call the model service, and
translate service errors into HTTP errors.
"""

import logging
from typing import Any

from fastapi import HTTPException

from ..core.dependencies import get_neo4j_client
from ..services.domain.sysml import (
    ALL_VIEWPOINTS,
    get_available_types_for_viewpoint,
    is_known_edge_kind,
    is_known_node_kind,
)
from ..services.errors import (
    CompositionError,
    ElementNotFoundError,
    RelationshipEndpointError,
    RelationshipNotFoundError,
)
from ..services.model_service import ModelService

logger = logging.getLogger(__name__)


def _service() -> ModelService:
    return ModelService(get_neo4j_client())


def _internal_error(action: str, e: Exception) -> HTTPException:
    logger.error(f"Error {action}: {e}")
    return HTTPException(status_code=500, detail=f"Failed to {action}")


def list_viewpoints() -> list[dict[str, Any]]:
    """All viewpoints in catalog order."""
    return [viewpoint.to_dict() for viewpoint in ALL_VIEWPOINTS]


def get_viewpoint_types(viewpoint_id: str) -> dict[str, list[str]]:
    """Node and edge kinds available in a viewpoint (empty for unknown ids)."""
    return get_available_types_for_viewpoint(viewpoint_id)


def fetch_model(viewpoint_id: str | None = None) -> dict[str, Any]:
    try:
        return _service().fetch_model(viewpoint_id)
    except Exception as e:
        raise _internal_error("fetch model", e) from e


def create_element(kind: str, spec: dict[str, Any]) -> None:
    """Create an element after checking its kind against the catalog.

    Raises:
        HTTPException: 400 for an unknown kind or a spec without id/name
    """
    if not is_known_node_kind(kind):
        raise HTTPException(status_code=400, detail=f"Unknown element kind: {kind}")
    if not spec.get("id") or not spec.get("name"):
        raise HTTPException(status_code=400, detail="Element spec requires 'id' and 'name'")

    try:
        _service().create_element(kind, spec)
    except Exception as e:
        raise _internal_error("create element", e) from e


def update_element(element_id: str, updates: dict[str, Any]) -> None:
    try:
        _service().update_element(element_id, updates)
    except ElementNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except Exception as e:
        raise _internal_error("update element", e) from e


def delete_element(element_id: str) -> None:
    try:
        _service().delete_element(element_id)
    except Exception as e:
        raise _internal_error("delete element", e) from e


def update_element_position(element_id: str, viewpoint_id: str, position: dict[str, float]) -> None:
    try:
        _service().update_element_position(element_id, viewpoint_id, position)
    except ElementNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except Exception as e:
        raise _internal_error("update position", e) from e


def create_relationship(relationship_spec: dict[str, Any]) -> None:
    """Create a relationship after checking its edge kind against the catalog.

    Raises:
        HTTPException: 400 for an unknown edge kind or missing endpoints
    """
    if not is_known_edge_kind(relationship_spec["type"]):
        raise HTTPException(status_code=400, detail=f"Unknown relationship type: {relationship_spec['type']}")

    try:
        _service().create_relationship(relationship_spec)
    except RelationshipEndpointError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except Exception as e:
        raise _internal_error("create relationship", e) from e


def update_relationship(relationship_id: str, updates: dict[str, Any]) -> None:
    try:
        _service().update_relationship(relationship_id, updates)
    except RelationshipNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except Exception as e:
        raise _internal_error("update relationship", e) from e


def delete_relationship(relationship_id: str) -> None:
    try:
        _service().delete_relationship(relationship_id)
    except Exception as e:
        raise _internal_error("delete relationship", e) from e


def create_composition(source_id: str, target_id: str, part_name: str, composition_type: str) -> dict[str, str]:
    try:
        return _service().create_composition(source_id, target_id, part_name, composition_type)
    except CompositionError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except Exception as e:
        raise _internal_error("create composition", e) from e


def delete_composition(part_usage_id: str) -> None:
    try:
        _service().delete_composition(part_usage_id)
    except Exception as e:
        raise _internal_error("delete composition", e) from e


def create_state_in_state_machine(state_machine_id: str, state_definition_id: str, state_name: str) -> dict[str, str]:
    try:
        return _service().create_state_in_state_machine(state_machine_id, state_definition_id, state_name)
    except CompositionError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except Exception as e:
        raise _internal_error("create state", e) from e


def delete_state_from_state_machine(state_usage_id: str) -> None:
    try:
        _service().delete_state_from_state_machine(state_usage_id)
    except Exception as e:
        raise _internal_error("delete state", e) from e
