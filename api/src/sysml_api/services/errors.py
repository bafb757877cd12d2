#!/usr/bin/env python3
"""Exceptions raised by the SysML model and diagram services."""


class SysMLServiceError(Exception):
    """Base class for service-level failures."""


class ElementNotFoundError(SysMLServiceError):
    def __init__(self, element_id: str):
        self.element_id = element_id
        super().__init__(f"Element with id {element_id} not found")


class RelationshipNotFoundError(SysMLServiceError):
    def __init__(self, relationship_id: str):
        self.relationship_id = relationship_id
        super().__init__(f"Relationship with id {relationship_id} not found")


class RelationshipEndpointError(SysMLServiceError):
    """Source or target element of a new relationship does not exist."""

    def __init__(self, source_id: str, target_id: str):
        self.source_id = source_id
        self.target_id = target_id
        super().__init__(
            f"Failed to create relationship. Source {source_id} or target {target_id} not found."
        )


class CompositionError(SysMLServiceError):
    """Owner or referenced definition of a composition does not exist."""


class DiagramNotFoundError(SysMLServiceError):
    def __init__(self, diagram_id: str):
        self.diagram_id = diagram_id
        super().__init__(f"Diagram with id {diagram_id} not found")
