"""
HTTP API for logo text extraction, color analysis and style guide rendering.

Run with:
    uvicorn server:app --reload
"""

import logging

import openai
import uvicorn
from fastapi import Depends, FastAPI, Form, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from starlette.datastructures import UploadFile

from errors import DecodeError, RejectionError, ServiceError
from extract_colors import analyze_bytes, decode_image
from palette import DEFAULT_TITLE, build_style_guide
from settings import Settings, get_settings, settings
from style_guide import render_html
from text_extraction import extract_logo_text, make_client, to_data_url
from uploads import UploadedFile, screen_upload

NO_IMAGE = "No image provided or invalid file"
INTERNAL_ERROR = "Internal Server Error."

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.app_name,
    description="Logo color extraction and style guide generation",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Error handlers
# =============================================================================

@app.exception_handler(RejectionError)
async def rejection_handler(request: Request, exc: RejectionError):
    return JSONResponse(status_code=400, content={"error": str(exc)})


@app.exception_handler(DecodeError)
async def decode_handler(request: Request, exc: DecodeError):
    return JSONResponse(status_code=422, content={"error": str(exc)})


@app.exception_handler(ServiceError)
async def service_handler(request: Request, exc: ServiceError):
    logger.error("Text extraction failed: %s", exc)
    return JSONResponse(status_code=500, content={"error": INTERNAL_ERROR})


# =============================================================================
# Dependencies
# =============================================================================

async def get_logo(request: Request, settings: Settings = Depends(get_settings)) -> UploadedFile:
    """Read and screen the multipart 'logo' field."""
    form = await request.form()
    logo = form.get("logo")
    if not isinstance(logo, UploadFile):
        raise RejectionError(NO_IMAGE)

    data = await logo.read()
    upload = UploadedFile(
        filename=logo.filename or "logo",
        content_type=logo.content_type or "",
        data=data,
    )
    return screen_upload(upload, settings.max_upload_bytes)


def get_openai_client(settings: Settings = Depends(get_settings)) -> openai.OpenAI:
    return make_client(settings)


# =============================================================================
# Routes
# =============================================================================

@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/api/logo/text")
def logo_text(logo: UploadedFile = Depends(get_logo),
              client: openai.OpenAI = Depends(get_openai_client),
              settings: Settings = Depends(get_settings)):
    text = extract_logo_text(logo.data, logo.content_type, client=client, model=settings.openai_model)
    return {"message": "Success.", "data": text}


@app.post("/api/logo/colors")
def logo_colors(logo: UploadedFile = Depends(get_logo)):
    swatches = analyze_bytes(logo.data, logo.content_type)
    return {"message": "Success.", "data": [s.to_dict() for s in swatches]}


@app.post("/api/style-guide", response_class=HTMLResponse)
def style_guide(logo: UploadedFile = Depends(get_logo),
                primary: str = Form(...),
                secondary: str = Form(...),
                title: str = Form(DEFAULT_TITLE),
                wordmark: str = Form("")):
    # Reject undecodable logos before rendering them into the page
    decode_image(logo.data, logo.content_type)

    try:
        guide = build_style_guide(primary, secondary, wordmark=wordmark or None, title=title)
    except ValueError as e:
        raise RejectionError(str(e)) from e

    return HTMLResponse(render_html(guide, to_data_url(logo.data, logo.content_type)))


if __name__ == "__main__":
    uvicorn.run("server:app", host=settings.app_host, port=settings.app_port)
