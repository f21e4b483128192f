# app/core/ingestion.py

"""
Batch ingestion pipeline.

Each uploaded file goes through:
1. MIME type and size checks
2. Bank detection from the filename
3. Spreadsheet parsing (first sheet)
4. Schema validation
5. Bank adapter + category hint
6. A single store insert

Every file ends in exactly one FileResult. A failing file never stops the
files after it.
"""

from typing import Optional, Protocol
import logging

from fastapi.concurrency import run_in_threadpool

from app.config import Settings
from app.core.adapters import TransformResult, detect_bank, get_adapter
from app.core.classification import UNCATEGORIZED, classify
from app.core.errors import (
    FileValidationError,
    IngestionError,
    SchemaValidationError,
    SpreadsheetParseError,
    StoreError,
)
from app.core.schema import validate_schema
from app.core.spreadsheet import read_first_sheet
from app.core.stores import MovementStore
from app.models import BatchResult, FileResult, MovementCreate

logger = logging.getLogger(__name__)


class UploadedFile(Protocol):
    """What the pipeline needs from an upload (starlette's UploadFile fits)."""

    filename: Optional[str]
    size: Optional[int]

    @property
    def content_type(self) -> Optional[str]: ...

    async def read(self, size: int = -1) -> bytes: ...

    async def close(self) -> None: ...


def _with_category_hint(movement: MovementCreate) -> MovementCreate:
    code = classify(movement.amount, movement.description)
    category = None if code == UNCATEGORIZED else code
    return movement.model_copy(update={"category": category})


class IngestionPipeline:
    """Turns uploaded statements into stored movements."""

    def __init__(self, movements: MovementStore, settings: Settings):
        self.movements = movements
        self.max_bytes = settings.max_upload_bytes
        self.allowed_mime_types = set(settings.allowed_mime_types)
        self.strict = settings.strict_parsing

    async def ingest_batch(self, files: list[UploadedFile]) -> BatchResult:
        """Process files one at a time; results keep the input order."""
        results = []
        for upload in files:
            results.append(await self.ingest_file(upload))

        batch = BatchResult.from_results(results)
        logger.info(
            "Batch processed: %d files, %d ok, %d failed",
            batch.processed_files,
            batch.summary.total_success,
            batch.summary.total_errors,
        )
        return batch

    async def ingest_file(self, upload: UploadedFile) -> FileResult:
        """Process one file. The upload is always closed afterwards."""
        filename = upload.filename or ""
        try:
            return await self._process(upload, filename)
        except SchemaValidationError as e:
            logger.warning("%s rejected: %s", filename, e.details)
            return FileResult(
                filename=filename,
                success=False,
                outcome=e.outcome,
                bank=e.bank,
                error_code=e.code,
                error=e.message,
                details=e.details,
                missing_columns=e.missing,
            )
        except IngestionError as e:
            logger.warning("%s rejected: %s", filename, e.message)
            return FileResult(
                filename=filename,
                success=False,
                outcome=e.outcome,
                error_code=e.code,
                error=e.message,
                details=e.details,
            )
        except StoreError as e:
            logger.error("Insert failed for %s: %s", filename, e)
            return FileResult(
                filename=filename,
                success=False,
                outcome="store_failed",
                error_code="PROCESSING_ERROR",
                error="Error al guardar los movimientos",
                details=str(e),
            )
        except Exception as e:
            logger.exception("Unexpected error processing %s", filename)
            return FileResult(
                filename=filename,
                success=False,
                outcome="processing_failed",
                error_code="PROCESSING_ERROR",
                error="Error al procesar el archivo",
                details=str(e),
            )
        finally:
            await upload.close()

    async def _process(self, upload: UploadedFile, filename: str) -> FileResult:
        # ============================================
        # Type and size
        # ============================================
        content_type = upload.content_type
        if content_type not in self.allowed_mime_types:
            raise FileValidationError(
                "INVALID_FILE_TYPE",
                "type_rejected",
                "Formato de archivo no válido",
                f"Tipo detectado: {content_type}. Solo se aceptan archivos Excel (.xls, .xlsx)",
            )

        declared = getattr(upload, "size", None)
        if declared is not None and declared > self.max_bytes:
            raise self._too_large(declared)

        # Never hold more than the ceiling plus one byte in memory
        content = await upload.read(self.max_bytes + 1)
        if len(content) > self.max_bytes:
            raise self._too_large(len(content))

        # ============================================
        # Bank
        # ============================================
        bank = detect_bank(filename)
        if bank is None:
            raise FileValidationError(
                "UNKNOWN_BANK_TYPE",
                "bank_unrecognized",
                "Tipo de archivo no reconocido",
                'El nombre del archivo debe contener "Santander" o "Caixabank"',
            )

        # ============================================
        # Parse and validate
        # ============================================
        rows = await run_in_threadpool(read_first_sheet, content, filename)
        if not rows:
            raise SpreadsheetParseError(
                "Archivo vacío o sin datos",
                "El archivo Excel no contiene datos en la primera hoja",
            )

        validate_schema(bank, rows[0])

        # ============================================
        # Transform
        # ============================================
        adapter = get_adapter(bank, strict=self.strict)
        transformed: TransformResult = adapter.transform(rows, row_numbers=rows.row_numbers)
        movements = [_with_category_hint(m) for m in transformed.movements]

        if not movements:
            logger.warning(
                "%s produced no movements (%d skipped, %d rejected)",
                filename,
                transformed.skipped,
                len(transformed.row_errors),
            )
            return FileResult(
                filename=filename,
                success=False,
                outcome="transform_empty",
                bank=bank,
                rows_skipped=transformed.skipped,
                row_errors=transformed.row_errors,
                error_code="TRANSFORM_ERROR",
                error="Datos no reconocidos",
                details="El archivo no contiene el formato esperado para este banco",
            )

        # ============================================
        # Store
        # ============================================
        await self.movements.insert_many(movements)

        logger.info(
            "%s committed: %d movements from %s (%s)",
            filename,
            len(movements),
            bank,
            adapter.mapping_version,
        )
        return FileResult(
            filename=filename,
            success=True,
            outcome="committed",
            bank=bank,
            records_processed=len(movements),
            rows_skipped=transformed.skipped,
            row_errors=transformed.row_errors,
            details="Archivo procesado correctamente",
        )

    def _too_large(self, size: int) -> FileValidationError:
        return FileValidationError(
            "FILE_TOO_LARGE",
            "size_rejected",
            "Archivo demasiado grande",
            f"Tamaño: {size / (1024 * 1024):.2f}MB. Límite: {self.max_bytes / (1024 * 1024):.0f}MB",
        )
