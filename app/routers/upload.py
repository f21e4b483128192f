# app/routers/upload.py

"""
Statement upload route.

Accepts one or more spreadsheet files under the `files` field and ingests
each one independently.
"""

import logging

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import JSONResponse

from app.core.ingestion import IngestionPipeline
from app.dependencies import get_ingestion_pipeline

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/upload")
async def upload_statements(
    files: list[UploadFile] = File(default=[]),
    pipeline: IngestionPipeline = Depends(get_ingestion_pipeline),
):
    """
    Ingest uploaded bank statements.

    Returns 200 when every file was stored, 207 when only some were, and 400
    when none were.
    """
    if not files:
        return JSONResponse(
            status_code=400,
            content={
                "success": False,
                "errorCode": "NO_FILES",
                "error": "No se detectaron archivos",
                "details": "Por favor, selecciona al menos un archivo Excel",
                "processedFiles": 0,
                "results": [],
                "summary": {"totalSuccess": 0, "totalErrors": 0},
            },
        )

    try:
        batch = await pipeline.ingest_batch(files)
    except Exception as e:
        logger.exception("Upload batch failed")
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": "Error en el servidor",
                "details": str(e),
            },
        )

    return JSONResponse(status_code=batch.http_status, content=batch.to_response())
