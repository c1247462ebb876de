import logging
import os
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from fastapi import APIRouter, Body, File, UploadFile
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, Field

from ..config import load_settings
from ..core.analyzer import analyze, explain
from ..core.errors import ElementNotFoundError, JMXParseError, UnsupportedElementError
from ..core.parser import parse_jmx
from ..core.registry import default_registry
from ..core.sample import build_sample_plan
from ..core.selection import select_thread_groups, thread_group_names
from ..core.serializer import serialize_jmx
from ..elements.catalog import CATEGORIES
from ..utils.plan_store import PlanStore, StoredPlan

logger = logging.getLogger(__name__)

router = APIRouter()
settings = load_settings()
plan_store = PlanStore(max_plans=settings.max_plans)

JMX_MEDIA_TYPE = "application/xml"


class AddElementRequest(BaseModel):
    parent_id: str
    type: str
    index: Optional[int] = None
    fields: Dict[str, Any] = Field(default_factory=dict)


class SelectRequest(BaseModel):
    thread_groups: List[str]


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _plan_not_found(plan_id: str) -> JSONResponse:
    return _error(404, f"Test plan not found: {plan_id}")


def _plan_payload(stored: StoredPlan) -> Dict[str, Any]:
    return {
        "plan_id": stored.plan_id,
        "filename": stored.filename,
        "test_plan": stored.document.model_dump(mode="json"),
        "thread_groups": thread_group_names(stored.document),
        "diagnostics": [d.model_dump() for d in stored.diagnostics],
    }


def _content_disposition(filename: str) -> str:
    # Header values are latin-1; the UTF-8 name goes in filename* (RFC 5987)
    fallback = filename.encode("ascii", "replace").decode("ascii").replace("?", "_").replace('"', "_")
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename)}"


def _jmx_response(text: str, filename: str) -> Response:
    return Response(
        content=text,
        media_type=JMX_MEDIA_TYPE,
        headers={"Content-Disposition": _content_disposition(filename)},
    )


def _download_name(stored: StoredPlan) -> str:
    if stored.filename:
        return os.path.basename(stored.filename)
    return f"{stored.document.test_plan.name.replace(' ', '_')}.jmx"


# --- Component library ---

@router.get("/api/jmx/component-library")
async def get_component_library():
    """Every element kind the editor can add, with its default values"""
    return {
        "success": True,
        "categories": list(CATEGORIES),
        "components": default_registry().catalog(),
    }


@router.get("/api/jmx/component-library/{category}")
async def get_components_by_category(category: str):
    if category not in CATEGORIES:
        return _error(404, f"Unknown component category: {category}")
    components = [entry for entry in default_registry().catalog() if entry["category"] == category]
    return {"success": True, "category": category, "components": components}


# --- Loading plans ---

@router.post("/api/jmx/parse")
async def parse_jmx_file(file: UploadFile = File(...)):
    """Parse an uploaded .jmx file and keep it for editing"""
    if not file.filename or not file.filename.lower().endswith(".jmx"):
        return _error(400, "File must be a .jmx file")

    content = await file.read()
    if len(content) > settings.max_upload_bytes:
        return _error(413, f"File exceeds the {settings.max_upload_bytes} byte upload limit")

    try:
        result = parse_jmx(content)
    except JMXParseError as e:
        logger.warning("Rejected %s: %s", file.filename, e)
        return _error(400, str(e))

    for diagnostic in result.diagnostics:
        logger.info("%s: %s (%s)", file.filename, diagnostic.message, diagnostic.code)

    stored = plan_store.add(result.document, filename=file.filename, diagnostics=result.diagnostics)
    logger.info("Loaded %s as plan %s", file.filename, stored.plan_id)
    return {
        "success": True,
        **_plan_payload(stored),
        "message": f"Successfully parsed {file.filename}",
    }


@router.post("/api/jmx/load-sample")
async def load_sample_jmx():
    """Load a sample JMX test plan for demonstration"""
    stored = plan_store.add(build_sample_plan(**settings.envelope()))
    logger.info("Loaded sample plan %s", stored.plan_id)
    return {
        "success": True,
        **_plan_payload(stored),
        "message": "Sample test plan loaded successfully",
    }


@router.get("/api/jmx/plans/{plan_id}")
async def get_plan(plan_id: str):
    stored = plan_store.get(plan_id)
    if stored is None:
        return _plan_not_found(plan_id)
    return {"success": True, **_plan_payload(stored)}


@router.get("/api/jmx/plans/{plan_id}/jmx")
async def download_plan(plan_id: str):
    stored = plan_store.get(plan_id)
    if stored is None:
        return _plan_not_found(plan_id)
    return _jmx_response(serialize_jmx(stored.document), _download_name(stored))


@router.get("/api/jmx/plans/{plan_id}/analysis")
async def analyze_plan(plan_id: str):
    stored = plan_store.get(plan_id)
    if stored is None:
        return _plan_not_found(plan_id)
    findings = analyze(stored.document)
    return {
        "success": True,
        "findings": [finding.model_dump() for finding in findings],
        "summary": explain(stored.document),
    }


# --- Editing by element id ---

@router.post("/api/jmx/plans/{plan_id}/elements")
async def add_element(plan_id: str, request: AddElementRequest):
    stored = plan_store.get(plan_id)
    if stored is None:
        return _plan_not_found(plan_id)

    try:
        element = default_registry().create(request.type, **request.fields)
        stored.document.insert(request.parent_id, element, index=request.index)
    except UnsupportedElementError as e:
        return _error(400, str(e))
    except ElementNotFoundError as e:
        return _error(404, str(e))
    except ValueError as e:
        return _error(422, f"Cannot add {request.type}: {e}")

    logger.info("Plan %s: added %s %s under %s", plan_id, element.type, element.id, request.parent_id)
    return {"success": True, "element": element.model_dump(mode="json")}


@router.patch("/api/jmx/plans/{plan_id}/elements/{element_id}")
async def update_element(plan_id: str, element_id: str, fields: Dict[str, Any] = Body(...)):
    stored = plan_store.get(plan_id)
    if stored is None:
        return _plan_not_found(plan_id)

    try:
        element = stored.document.update(element_id, fields)
    except ElementNotFoundError as e:
        return _error(404, str(e))
    except ValueError as e:
        # pydantic's ValidationError is a ValueError too
        return _error(422, str(e))

    return {"success": True, "element": element.model_dump(mode="json")}


@router.delete("/api/jmx/plans/{plan_id}/elements/{element_id}")
async def delete_element(plan_id: str, element_id: str):
    stored = plan_store.get(plan_id)
    if stored is None:
        return _plan_not_found(plan_id)

    try:
        removed = stored.document.remove(element_id)
    except ElementNotFoundError as e:
        return _error(404, str(e))
    except ValueError as e:
        return _error(400, str(e))

    logger.info("Plan %s: removed %s %s", plan_id, removed.type, removed.id)
    return {"success": True, "removed": removed.id}


@router.post("/api/jmx/plans/{plan_id}/elements/{element_id}/toggle")
async def toggle_element(plan_id: str, element_id: str):
    stored = plan_store.get(plan_id)
    if stored is None:
        return _plan_not_found(plan_id)

    try:
        element = stored.document.toggle(element_id)
    except ElementNotFoundError as e:
        return _error(404, str(e))

    return {"success": True, "id": element.id, "enabled": element.enabled}


# --- Handing off to the executor ---

@router.post("/api/jmx/plans/{plan_id}/select")
async def select_for_run(plan_id: str, request: SelectRequest):
    """Serialized plan with only the chosen thread groups enabled"""
    stored = plan_store.get(plan_id)
    if stored is None:
        return _plan_not_found(plan_id)

    try:
        selected = select_thread_groups(stored.document, request.thread_groups)
    except ValueError as e:
        return _error(400, str(e))

    return _jmx_response(serialize_jmx(selected), _download_name(stored))
