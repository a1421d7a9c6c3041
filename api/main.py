# --- Algorithm Trace Visualizer API (FastAPI) ---------------------------------
# Purpose: HTTP surface for (1) heuristic algorithm detection, (2) synthetic
# trace generation ("execute"), (3) SVG rendering of a single step, and
# (4) CRUD for projects, reference algorithms and saved visualizations.
# ------------------------------------------------------------------------------

from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from algotrace.catalog import Catalog
from algotrace.classifier import Classifier
from algotrace.config import Settings
from algotrace.generator import TraceGenerator
from algotrace.models import (
    Algorithm, Project, ProjectCreate, ProjectUpdate, Visualization, VisualizationCreate,
)
from algotrace.pipeline import TracePipeline
from algotrace.render import render_step
from algotrace.storage import Storage, StorageError
from algotrace.types import TraceStep

logger = logging.getLogger(__name__)

# ----------------------------- Schemas ----------------------------------------
class DetectRequest(BaseModel):
    # Both fields are checked in the route so empty strings are rejected too.
    code: Optional[str] = None
    language: Optional[str] = None

class ExecuteRequest(DetectRequest):
    # Optional override of the literals scraped from the code
    # (array / {array, target} / {operations} / {nodes, edges}).
    input: Any = None

class RenderRequest(BaseModel):
    step: Dict[str, Any]
    width: int = 800

# ----------------------------- Dependencies -----------------------------------
def get_storage(request: Request) -> Storage:
    return request.app.state.storage

def get_pipeline(request: Request) -> TracePipeline:
    return request.app.state.pipeline

def _require_code(req: DetectRequest) -> None:
    if not req.code or not req.language:
        raise HTTPException(status_code=400, detail="Code and language are required")

router = APIRouter()

# ----------------------------- Routes -----------------------------------------
@router.get("/health")
def health(): return {"ok": True}

@router.get("/api/algorithms", response_model=List[Algorithm])
def list_algorithms(storage: Storage = Depends(get_storage)):
    return storage.get_all_algorithms()

@router.get("/api/algorithms/category/{category}", response_model=List[Algorithm])
def list_algorithms_by_category(category: str, storage: Storage = Depends(get_storage)):
    return storage.get_algorithms_by_category(category)

@router.get("/api/algorithms/{algorithm_id}", response_model=Algorithm)
def get_algorithm(algorithm_id: str, storage: Storage = Depends(get_storage)):
    algorithm = storage.get_algorithm(algorithm_id)
    if algorithm is None:
        raise HTTPException(status_code=404, detail="Algorithm not found")
    return algorithm

@router.get("/api/projects/public", response_model=List[Project])
def list_public_projects(storage: Storage = Depends(get_storage)):
    return storage.get_public_projects()

@router.post("/api/projects", response_model=Project, status_code=201)
def create_project(data: ProjectCreate, storage: Storage = Depends(get_storage)):
    try:
        return storage.create_project(data)
    except StorageError as e:
        raise HTTPException(status_code=400, detail=str(e))

@router.get("/api/projects/{project_id}", response_model=Project)
def get_project(project_id: str, storage: Storage = Depends(get_storage)):
    project = storage.get_project(project_id)
    if project is None:
        raise HTTPException(status_code=404, detail="Project not found")
    return project

@router.patch("/api/projects/{project_id}", response_model=Project)
def update_project(project_id: str, data: ProjectUpdate, storage: Storage = Depends(get_storage)):
    try:
        project = storage.update_project(project_id, data)
    except StorageError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if project is None:
        raise HTTPException(status_code=404, detail="Project not found")
    return project

@router.delete("/api/projects/{project_id}")
def delete_project(project_id: str, storage: Storage = Depends(get_storage)):
    if not storage.delete_project(project_id):
        raise HTTPException(status_code=404, detail="Project not found")
    return {"message": "Project deleted successfully"}

@router.get("/api/projects/{project_id}/visualizations", response_model=List[Visualization])
def list_project_visualizations(project_id: str, storage: Storage = Depends(get_storage)):
    if storage.get_project(project_id) is None:
        raise HTTPException(status_code=404, detail="Project not found")
    return storage.get_visualizations_by_project(project_id)

@router.post("/api/visualizations", response_model=Visualization, status_code=201)
def create_visualization(data: VisualizationCreate, storage: Storage = Depends(get_storage)):
    try:
        return storage.create_visualization(data)
    except StorageError as e:
        raise HTTPException(status_code=400, detail=str(e))

@router.get("/api/visualizations/{visualization_id}", response_model=Visualization)
def get_visualization(visualization_id: str, storage: Storage = Depends(get_storage)):
    visualization = storage.get_visualization(visualization_id)
    if visualization is None:
        raise HTTPException(status_code=404, detail="Visualization not found")
    return visualization

@router.post("/api/algorithm/detect")
def detect_algorithm(req: DetectRequest, pipeline: TracePipeline = Depends(get_pipeline)):
    """
    Heuristic classification only: keyword hits + regex signatures.
    Returns {algorithmType, confidence, details, matches}.
    """
    _require_code(req)
    try:
        return pipeline.detect(req.code, req.language).to_dict()
    except Exception:
        logger.exception("Error detecting algorithm")
        raise HTTPException(status_code=500, detail="Failed to detect algorithm")

@router.post("/api/execute")
def execute(req: ExecuteRequest, pipeline: TracePipeline = Depends(get_pipeline)):
    """
    Simulated execution: classify, then fabricate the step list for the
    detected category. The submitted code is never run.
    """
    _require_code(req)
    try:
        return pipeline.trace(req.code, req.language, req.input).to_dict()
    except Exception:
        logger.exception("Error executing code")
        raise HTTPException(status_code=500, detail="Failed to execute code")

@router.post("/api/render")
def render(req: RenderRequest):
    # Shape errors surface either while decoding or while drawing the payload
    try:
        return {"svg": render_step(TraceStep.from_dict(req.step), width=req.width)}
    except (KeyError, TypeError, ValueError) as e:
        raise HTTPException(status_code=400, detail=f"Invalid step: {e}")
    except Exception:
        logger.exception("Error rendering step")
        raise HTTPException(status_code=500, detail="Failed to render step")

# ----------------------------- App factory ------------------------------------
async def _validation_error(request: Request, exc: RequestValidationError):
    # 400 (not FastAPI's default 422) with structured validation details
    return JSONResponse(status_code=400, content={
        "detail": "Invalid request data",
        "errors": jsonable_encoder(exc.errors()),
    })

def create_app(catalog: Catalog | None = None,
               storage: Storage | None = None,
               pipeline: TracePipeline | None = None,
               settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings.from_env()
    catalog = catalog or Catalog.from_file(settings.catalog_path)
    if storage is None:
        storage = Storage(settings.storage_path)
    storage.seed_algorithms(catalog)
    pipeline = pipeline or TracePipeline(
        catalog,
        classifier=Classifier(catalog, settings.confidence_scale),
        generator=TraceGenerator(generic_step_limit=settings.generic_step_limit,
                                 max_graph_nodes=settings.max_graph_nodes,
                                 max_graph_edges=settings.max_graph_edges),
    )

    app = FastAPI(title="Algorithm Trace Visualizer API")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RequestValidationError, _validation_error)
    app.state.settings = settings
    app.state.catalog = catalog
    app.state.storage = storage
    app.state.pipeline = pipeline
    app.include_router(router)
    return app

_settings = Settings.from_env()
logging.basicConfig(level=_settings.log_level)
app = create_app(settings=_settings)
