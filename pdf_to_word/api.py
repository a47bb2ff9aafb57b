"""
HTTP endpoints for the PDF to Word tool.

    POST /api/tools/pdf-to-word     multipart upload (field "file"),
                                    returns the conversion response
    GET  /uploads/{filename}        download a converted file
    GET  /api/download/{filename}   same, kept for older clients

Converted files live in a local directory and are deleted after the
configured retention period.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import FastAPI, File, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse

from . import __version__
from .errors import CorruptInputError, EmissionError, UnsupportedInputError
from .pipeline import ConversionPipeline
from .processing import SourceDocument
from .storage import LocalFileStorage, content_type_for

logger = logging.getLogger(__name__)


def _env_float(name: str, default: float) -> float:
    value = os.environ.get(name)
    return float(value) if value else default


@dataclass
class AppSettings:
    """Service settings, read from the environment by ``from_env``."""
    upload_dir: Path = field(default_factory=lambda: Path.cwd() / "public" / "uploads")
    url_prefix: str = "/uploads"
    retention_seconds: float = 3600
    allow_origins: tuple[str, ...] = ("*",)

    @classmethod
    def from_env(cls) -> "AppSettings":
        settings = cls()
        if os.environ.get("TOOLBOX_UPLOAD_DIR"):
            settings.upload_dir = Path(os.environ["TOOLBOX_UPLOAD_DIR"])
        settings.url_prefix = os.environ.get("TOOLBOX_URL_PREFIX", settings.url_prefix)
        settings.retention_seconds = _env_float("TOOLBOX_RETENTION_SECONDS", settings.retention_seconds)
        return settings


def create_app(
    pipeline: Optional[ConversionPipeline] = None,
    settings: Optional[AppSettings] = None,
) -> FastAPI:
    """Build the FastAPI application.

    A pipeline without a storage collaborator is given one rooted at
    ``settings.upload_dir``.
    """
    settings = settings or AppSettings.from_env()
    pipeline = pipeline or ConversionPipeline()
    if pipeline.storage is None:
        pipeline.storage = LocalFileStorage(
            settings.upload_dir,
            url_prefix=settings.url_prefix,
            retention_seconds=settings.retention_seconds,
        )
    storage = pipeline.storage

    app = FastAPI(
        title="toolbox-pdf-to-word",
        description="Convert PDF documents to Word and RTF",
        version=__version__,
    )
    app.state.pipeline = pipeline
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.allow_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health() -> Dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/tools/pdf-to-word", summary="Convert a PDF to DOCX and RTF")
    def pdf_to_word(file: Optional[UploadFile] = File(default=None)) -> Dict[str, Any]:
        if file is None:
            raise HTTPException(status_code=400, detail="No file provided")

        source = SourceDocument(
            data=file.file.read(),
            filename=file.filename or "document.pdf",
            media_type=file.content_type or "",
        )
        logger.info(f"Processing PDF: {source.filename} ({source.size} bytes)")

        try:
            response = pipeline.convert(source)
        except (UnsupportedInputError, CorruptInputError) as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except EmissionError as exc:
            logger.exception("Emission failed for '%s'", source.filename)
            raise HTTPException(
                status_code=500,
                detail="Error converting PDF to Word. See server logs for details.",
            ) from exc

        return response.to_dict()

    def _download(filename: str) -> FileResponse:
        try:
            path = storage.resolve(filename)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail="Invalid filename") from exc

        if not path.is_file():
            raise HTTPException(status_code=404, detail="File not found")

        return FileResponse(path, media_type=content_type_for(filename), filename=filename)

    @app.get(f"{settings.url_prefix.rstrip('/')}/{{filename}}")
    def uploaded_file(filename: str) -> FileResponse:
        return _download(filename)

    @app.get("/api/download/{filename}")
    def download(filename: str) -> FileResponse:
        return _download(filename)

    return app
