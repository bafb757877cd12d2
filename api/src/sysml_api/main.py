#!/usr/bin/env python3

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from .core.config import server_config
from .core.dependencies import cleanup_connections, get_neo4j_client
from .core.logging import setup_logging
from .models.models import (
    AddElementsRequest,
    BulkPositionsRequest,
    CompositionResponse,
    CreateCompositionRequest,
    CreateDiagramRequest,
    CreateElementRequest,
    CreateRelationshipRequest,
    CreateStateRequest,
    Diagram,
    DiagramPositionRequest,
    StateInStateMachineResponse,
    SuccessResponse,
    SysMLModel,
    UpdateDiagramRequest,
    UpdateElementRequest,
    UpdatePositionRequest,
    UpdateRelationshipRequest,
    ViewpointResponse,
    ViewpointTypesResponse,
)

logger = logging.getLogger(__name__)

# Application start time for uptime calculation
_app_start_time = time.time()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    # Startup
    setup_logging()
    logger.info("Starting SysML modeling API service")

    try:
        get_neo4j_client().verify_connectivity()
    except Exception as e:
        logger.warning(f"Neo4j not reachable at startup: {e}")

    yield

    # Shutdown
    logger.info("Shutting down SysML modeling API service")
    cleanup_connections()


app = FastAPI(
    title="SysML v2 Modeling API",
    description="API for authoring SysML v2 models stored in Neo4j and viewing them by viewpoint",
    version=server_config.APP_VERSION,
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=server_config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Add version header middleware
@app.middleware("http")
async def add_version_header(request, call_next):
    """Add version information to response headers"""
    response = await call_next(request)
    response.headers["X-API-Version"] = server_config.APP_VERSION
    return response


@app.get("/healthz")
async def health_check():
    """Liveness probe - checks if application is alive and can serve requests"""
    current_time = time.time()
    return {
        "status": "healthy",
        "timestamp": current_time,
        "uptime": current_time - _app_start_time,
        "api_version": server_config.APP_VERSION,
    }


@app.get("/readyz")
async def readiness_check():
    """Readiness probe - checks that Neo4j is reachable"""
    try:
        get_neo4j_client().verify_connectivity()
        return {"status": "ready"}

    except Exception as e:
        logger.warning(f"Readiness check failed: {e}")
        raise HTTPException(status_code=503, detail={"status": "not_ready"}) from e


# Viewpoint Routes

@app.get("/api/sysml/viewpoints", response_model=list[ViewpointResponse], response_model_exclude_none=True)
async def get_viewpoints():
    """Get all available viewpoints"""
    from .handlers.model import list_viewpoints
    return list_viewpoints()


@app.get("/api/sysml/viewpoints/{viewpoint_id}/types", response_model=ViewpointTypesResponse)
async def get_viewpoint_types(viewpoint_id: str):
    """Get the node and edge kinds available for a viewpoint"""
    from .handlers.model import get_viewpoint_types
    return get_viewpoint_types(viewpoint_id)


# Model & Element Routes

@app.get("/api/sysml/model", response_model=SysMLModel)
def get_model(viewpoint: str | None = None):
    """Fetch the entire model, optionally filtered by viewpoint"""
    from .handlers.model import fetch_model
    return fetch_model(viewpoint)


@app.post("/api/sysml/elements", status_code=201, response_model=SuccessResponse)
def create_element(request: CreateElementRequest):
    """Create a new element"""
    from .handlers.model import create_element
    create_element(request.kind, request.spec)
    return SuccessResponse()


@app.patch("/api/sysml/elements/{element_id}", response_model=SuccessResponse)
def update_element(element_id: str, request: UpdateElementRequest):
    """Update an element; fields not sent are left unchanged"""
    from .handlers.model import update_element
    update_element(element_id, request.updates)
    return SuccessResponse()


@app.delete("/api/sysml/elements/{element_id}", response_model=SuccessResponse)
def delete_element(element_id: str):
    """Delete an element and its relationships"""
    from .handlers.model import delete_element
    delete_element(element_id)
    return SuccessResponse()


@app.patch("/api/sysml/elements/{element_id}/position", response_model=SuccessResponse)
def update_element_position(element_id: str, request: UpdatePositionRequest):
    """Update element position for a viewpoint"""
    from .handlers.model import update_element_position
    update_element_position(element_id, request.viewpointId, request.position.model_dump())
    return SuccessResponse()


# Relationship Routes

@app.post("/api/sysml/relationships", status_code=201, response_model=SuccessResponse)
def create_relationship(request: CreateRelationshipRequest):
    """Create a new relationship"""
    from .handlers.model import create_relationship
    create_relationship(request.model_dump(exclude_none=True))
    return SuccessResponse()


@app.patch("/api/sysml/relationships/{relationship_id}", response_model=SuccessResponse)
def update_relationship(relationship_id: str, request: UpdateRelationshipRequest):
    """Update a relationship"""
    from .handlers.model import update_relationship
    update_relationship(relationship_id, request.updates)
    return SuccessResponse()


@app.delete("/api/sysml/relationships/{relationship_id}", response_model=SuccessResponse)
def delete_relationship(relationship_id: str):
    """Delete a relationship"""
    from .handlers.model import delete_relationship
    delete_relationship(relationship_id)
    return SuccessResponse()


@app.post("/api/sysml/compositions", status_code=201, response_model=CompositionResponse)
def create_composition(request: CreateCompositionRequest):
    """Compose a definition into an owner through a new part-usage"""
    from .handlers.model import create_composition
    return create_composition(request.sourceId, request.targetId, request.partName, request.compositionType)


@app.delete("/api/sysml/compositions/{part_usage_id}", response_model=SuccessResponse)
def delete_composition(part_usage_id: str):
    """Delete a composition and its intermediate part-usage"""
    from .handlers.model import delete_composition
    delete_composition(part_usage_id)
    return SuccessResponse()


@app.post("/api/sysml/state-machines/{state_machine_id}/states", status_code=201,
          response_model=StateInStateMachineResponse)
def create_state_in_state_machine(state_machine_id: str, request: CreateStateRequest):
    """Add a state to a state machine through a new state-usage"""
    from .handlers.model import create_state_in_state_machine
    return create_state_in_state_machine(state_machine_id, request.stateDefinitionId, request.stateName)


@app.delete("/api/sysml/state-machines/states/{state_usage_id}", response_model=SuccessResponse)
def delete_state_from_state_machine(state_usage_id: str):
    """Remove a state from its state machine"""
    from .handlers.model import delete_state_from_state_machine
    delete_state_from_state_machine(state_usage_id)
    return SuccessResponse()


# Diagram Routes

@app.get("/api/sysml/diagrams", response_model=list[Diagram])
def get_diagrams(viewpoint: str | None = None):
    """Get all diagrams, optionally filtered by viewpoint"""
    from .handlers.diagram import fetch_diagrams
    return fetch_diagrams(viewpoint)


@app.get("/api/sysml/diagrams/{diagram_id}", response_model=Diagram)
def get_diagram(diagram_id: str):
    """Get a specific diagram"""
    from .handlers.diagram import fetch_diagram
    return fetch_diagram(diagram_id)


@app.post("/api/sysml/diagrams", status_code=201, response_model=Diagram)
def create_diagram(request: CreateDiagramRequest):
    """Create a new diagram"""
    from .handlers.diagram import create_diagram
    return create_diagram(request.model_dump(exclude_none=True))


@app.patch("/api/sysml/diagrams/{diagram_id}", response_model=SuccessResponse)
def update_diagram(diagram_id: str, request: UpdateDiagramRequest):
    """Update diagram metadata (name, viewpointId)"""
    from .handlers.diagram import update_diagram
    update_diagram(diagram_id, request.model_dump(exclude_none=True))
    return SuccessResponse()


@app.delete("/api/sysml/diagrams/{diagram_id}", response_model=SuccessResponse)
def delete_diagram(diagram_id: str):
    """Delete a diagram"""
    from .handlers.diagram import delete_diagram
    delete_diagram(diagram_id)
    return SuccessResponse()


@app.post("/api/sysml/diagrams/{diagram_id}/elements", response_model=SuccessResponse)
def add_elements_to_diagram(diagram_id: str, request: AddElementsRequest):
    """Add elements to a diagram"""
    from .handlers.diagram import add_elements_to_diagram
    add_elements_to_diagram(diagram_id, request.elementIds)
    return SuccessResponse()


@app.delete("/api/sysml/diagrams/{diagram_id}/elements/{element_id}", response_model=SuccessResponse)
def remove_element_from_diagram(diagram_id: str, element_id: str):
    """Remove an element from a diagram"""
    from .handlers.diagram import remove_element_from_diagram
    remove_element_from_diagram(diagram_id, element_id)
    return SuccessResponse()


@app.patch("/api/sysml/diagrams/{diagram_id}/elements/{element_id}/position", response_model=SuccessResponse)
def update_element_position_in_diagram(diagram_id: str, element_id: str, request: DiagramPositionRequest):
    """Update element position within a diagram"""
    from .handlers.diagram import update_element_position_in_diagram
    update_element_position_in_diagram(diagram_id, element_id, request.position.model_dump())
    return SuccessResponse()


@app.patch("/api/sysml/diagrams/{diagram_id}/positions", response_model=SuccessResponse)
def update_diagram_positions(diagram_id: str, request: BulkPositionsRequest):
    """Bulk update positions for all elements in a diagram"""
    from .handlers.diagram import update_diagram_positions
    positions = {element_id: position.model_dump() for element_id, position in request.positions.items()}
    update_diagram_positions(diagram_id, positions)
    return SuccessResponse()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=server_config.HOST, port=server_config.PORT)
