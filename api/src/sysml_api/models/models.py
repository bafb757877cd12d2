#!/usr/bin/env python3

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

# Pydantic Models


class Position(BaseModel):
    x: float
    y: float


class CreateElementRequest(BaseModel):
    kind: str  # kebab-case node kind, e.g. 'part-definition'
    spec: dict[str, Any]


class UpdateElementRequest(BaseModel):
    updates: dict[str, Any]


class CreateRelationshipRequest(BaseModel):
    model_config = ConfigDict(extra="allow")  # extra scalar properties are stored on the edge

    id: str
    type: str  # kebab-case edge kind, e.g. 'control-flow'
    source: str
    target: str
    label: str | None = None


class UpdateRelationshipRequest(BaseModel):
    updates: dict[str, Any]


class UpdatePositionRequest(BaseModel):
    viewpointId: str
    position: Position


class CreateCompositionRequest(BaseModel):
    sourceId: str
    targetId: str
    partName: str
    compositionType: Literal["composition", "aggregation"] = "composition"


class CompositionResponse(BaseModel):
    partUsageId: str
    definitionRelId: str
    compositionRelId: str


class CreateStateRequest(BaseModel):
    stateDefinitionId: str
    stateName: str


class StateInStateMachineResponse(BaseModel):
    stateUsageId: str
    definitionRelId: str
    compositionRelId: str


class SysMLNode(BaseModel):
    kind: str
    spec: dict[str, Any]


class SysMLModel(BaseModel):
    nodes: list[SysMLNode] = []
    relationships: list[dict[str, Any]] = []


class ViewpointResponse(BaseModel):
    id: str
    name: str
    description: str
    includeNodeKinds: list[str]
    includeEdgeKinds: list[str] | None = None


class ViewpointTypesResponse(BaseModel):
    nodeKinds: list[str]
    edgeKinds: list[str]


class CreateDiagramRequest(BaseModel):
    id: str | None = None
    name: str
    viewpointId: str
    elementIds: list[str] | None = None
    positions: dict[str, Position] | None = None


class UpdateDiagramRequest(BaseModel):
    name: str | None = None
    viewpointId: str | None = None


class AddElementsRequest(BaseModel):
    elementIds: list[str]


class DiagramPositionRequest(BaseModel):
    position: Position


class BulkPositionsRequest(BaseModel):
    positions: dict[str, Position]


class Diagram(BaseModel):
    id: str
    name: str
    viewpointId: str = ""
    elementIds: list[str] = Field(default_factory=list)
    positions: dict[str, Position] = Field(default_factory=dict)
    createdAt: str | None = None
    updatedAt: str | None = None


class SuccessResponse(BaseModel):
    success: bool = True
