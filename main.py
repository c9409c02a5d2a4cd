"""
Poster Card Generator - FastAPI Application
"""

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from pydantic import BaseModel, Field
from typing import Optional, List
from loguru import logger
import asyncio
import mimetypes
import sys
import time

from config import ConfigSection, settings
from modules import Exporter, FontRegistry, PosterComposer, RenderRequest, RenderResult, TemplateIngestor
from utils.exceptions import TemplateFileMissingError, TemplateNotFoundError, UnsafePathError
from utils.path_utils import resolve_safe_path

# Configure logging
settings.LOG_DIR.mkdir(parents=True, exist_ok=True)
logger.remove()
logger.add(sys.stderr, level="INFO")
logger.add(settings.LOG_DIR / "app.log", rotation="500 MB", retention="10 days", level="DEBUG")


# ============================================================================
# Response models
# ============================================================================
class StatusResponse(BaseModel):
    """Status response model"""
    ok: bool = True
    ts: Optional[float] = None


class TemplatesResponse(BaseModel):
    ok: bool = True
    templates: List[str]


class ClearOutputRequest(ConfigSection):
    """Request model for /clear-output"""
    title_dir: str = Field(..., min_length=1, description="Poster set directory to delete")


class RenderResponse(BaseModel):
    ok: bool = True
    result: RenderResult


# Initialize FastAPI app
app = FastAPI(
    title=settings.API_TITLE,
    version=settings.API_VERSION,
    description="Render cover, content and ending poster cards from templates with inline-styled text",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)


def get_ingestor() -> TemplateIngestor:
    return TemplateIngestor(settings.TEMPLATE_DIR)


def get_exporter() -> Exporter:
    return Exporter(settings.OUTPUT_DIR)


def get_fonts() -> FontRegistry:
    return FontRegistry(settings.FONTS, project_root=settings.PROJECT_ROOT)


# API Endpoints
@app.get("/health", response_model=StatusResponse)
async def health():
    """Health check endpoint"""
    return StatusResponse(ok=True, ts=time.time())


@app.get("/templates", response_model=TemplatesResponse)
async def list_templates():
    """List available template names"""
    return TemplatesResponse(templates=get_ingestor().list_templates())


@app.get("/list-template")
async def list_template(name: Optional[str] = None):
    """
    List the PNG files of a template

    Args:
        name: Template name (default template if not specified)
    """
    name = name or settings.DEFAULT_TEMPLATE
    try:
        files = get_ingestor().list_template_files(name)
    except TemplateNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except UnsafePathError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {"ok": True, "template": name, **files}


@app.get("/list-output")
async def list_output():
    """List every rendered file"""
    exporter = get_exporter()
    return {"ok": True, "output_dir": str(exporter.output_dir), "files": exporter.list_outputs()}


@app.get("/config")
async def get_config():
    """Return the base render configuration"""
    return {"ok": True, "config": settings.poster_config().model_dump(by_alias=True)}


@app.get("/fonts")
async def check_fonts():
    """Report configured fonts and whether their files exist"""
    return {"ok": True, "fonts": get_fonts().check()}


@app.post("/clear-output")
async def clear_output(request: ClearOutputRequest):
    """
    Delete one rendered poster set

    Args:
        request: Directory to delete
    """
    exporter = get_exporter()
    try:
        cleared = exporter.clear(request.title_dir)
    except UnsafePathError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if not cleared:
        raise HTTPException(status_code=404, detail="titleDir not found")

    return {"ok": True, "cleared": request.title_dir}


@app.post("/render/dry-run")
async def render_dry_run(request: RenderRequest):
    """
    Check that a render would find its template and fonts, without drawing

    Args:
        request: Render request
    """
    name = request.template_name or settings.DEFAULT_TEMPLATE
    try:
        template = get_ingestor().list_template_files(name)
    except TemplateNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except UnsafePathError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if not template["png_files"]:
        raise HTTPException(status_code=400, detail="No template PNG found")

    fonts = get_fonts().check()
    missing = [f for f in fonts if not f["exists"]]
    if missing:
        raise HTTPException(
            status_code=400,
            detail={"error": "Some fonts are missing on disk", "missing": missing},
        )

    return {"ok": True, "template": template, "fonts": fonts}


@app.post("/render", response_model=RenderResponse)
async def render(request: RenderRequest):
    """
    Render cover, content pages and ending for a request

    Args:
        request: Render request

    Returns:
        Paths of the written files
    """
    composer = PosterComposer()
    try:
        result = await asyncio.to_thread(composer.render_all, request)
    except TemplateFileMissingError as e:
        logger.error(f"Render failed: {e}")
        raise HTTPException(status_code=404, detail=str(e))
    except UnsafePathError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception(f"Render failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    return RenderResponse(result=result)


@app.get("/preview")
async def preview(
    path: str = Query(..., min_length=1),
    scope: str = Query("output", pattern="^(template|output)$"),
):
    """
    Serve a template or output file

    Args:
        path: Path relative to the scope directory
        scope: 'template' or 'output'
    """
    base = settings.TEMPLATE_DIR if scope == "template" else settings.OUTPUT_DIR
    try:
        file_path = resolve_safe_path(base, path)
    except UnsafePathError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if not file_path.is_file():
        raise HTTPException(status_code=404, detail="file not found")

    media_type = mimetypes.guess_type(file_path.name)[0] or "application/octet-stream"
    return FileResponse(file_path, media_type=media_type)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=True
    )
