#!/usr/bin/env python3
"""Handlers for saved diagram operations."""

import logging
from typing import Any

from fastapi import HTTPException

from ..core.dependencies import get_neo4j_client
from ..services.diagram_service import DiagramService
from ..services.errors import DiagramNotFoundError

logger = logging.getLogger(__name__)


def _service() -> DiagramService:
    return DiagramService(get_neo4j_client())


def _call(action: str, fn, *args):
    """Run a service call, mapping DiagramNotFoundError to 404 and anything else to 500."""
    try:
        return fn(*args)
    except DiagramNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except Exception as e:
        logger.error(f"Error {action}: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to {action}") from e


def fetch_diagrams(viewpoint_id: str | None = None) -> list[dict[str, Any]]:
    return _call("fetch diagrams", _service().fetch_diagrams, viewpoint_id)


def fetch_diagram(diagram_id: str) -> dict[str, Any]:
    diagram = _call("fetch diagram", _service().fetch_diagram, diagram_id)
    if diagram is None:
        raise HTTPException(status_code=404, detail="Diagram not found")
    return diagram


def create_diagram(spec: dict[str, Any]) -> dict[str, Any]:
    return _call("create diagram", _service().create_diagram, spec)


def update_diagram(diagram_id: str, updates: dict[str, Any]) -> None:
    _call("update diagram", _service().update_diagram, diagram_id, updates)


def delete_diagram(diagram_id: str) -> None:
    _call("delete diagram", _service().delete_diagram, diagram_id)


def add_elements_to_diagram(diagram_id: str, element_ids: list[str]) -> None:
    _call("add elements to diagram", _service().add_elements_to_diagram, diagram_id, element_ids)


def remove_element_from_diagram(diagram_id: str, element_id: str) -> None:
    _call("remove element from diagram", _service().remove_element_from_diagram, diagram_id, element_id)


def update_element_position_in_diagram(diagram_id: str, element_id: str, position: dict[str, float]) -> None:
    _call("update element position in diagram",
          _service().update_element_position_in_diagram, diagram_id, element_id, position)


def update_diagram_positions(diagram_id: str, positions: dict[str, dict[str, float]]) -> None:
    _call("update diagram positions", _service().update_diagram_positions, diagram_id, positions)
