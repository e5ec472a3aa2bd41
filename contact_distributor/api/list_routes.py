"""
Contact list API routes.
Upload a CSV/Excel list for distribution and read back the current distribution.
"""

import asyncio
from typing import Optional
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.responses import JSONResponse
from contact_distributor.core.config import settings
from contact_distributor.core.db.repository import AgentRepository, DistributionRepository
from contact_distributor.core.logging import setup_logger
from contact_distributor.core.security import require_admin
from contact_distributor.ingestion.errors import IngestionError
from contact_distributor.ingestion.normalize import CanonicalRecord
from contact_distributor.ingestion.orchestrator import ContactListIngestor
from contact_distributor.ingestion.uploads import (
    LocalTempFileStore,
    store_upload,
    validate_extension,
)

logger = setup_logger()

router = APIRouter(prefix="/api/lists", tags=["Lists"], dependencies=[Depends(require_admin)])

# Error kind -> HTTP status
ERROR_STATUS_CODES = {
    "UnsupportedFormat": 400,
    "UploadTooLarge": 400,
    "ParseError": 400,
    "ValidationError": 400,
    "NoAgentsError": 400,
    "DistributionPersistError": 500,
}


def get_ingestor() -> ContactListIngestor:
    return ContactListIngestor(
        roster=AgentRepository(),
        distributions=DistributionRepository(),
        temp_files=LocalTempFileStore()
    )


def error_response(error: IngestionError) -> JSONResponse:
    return JSONResponse(
        status_code=ERROR_STATUS_CODES.get(error.kind, 500),
        content={
            "message": error.message,
            "status": "error",
            "kind": error.kind,
            "details": error.details
        }
    )


@router.post("/upload")
async def upload_list(
    file: Optional[UploadFile] = File(None),
    ingestor: ContactListIngestor = Depends(get_ingestor)
):
    """
    Upload a contact list and distribute it across all agents.

    Accepts csv, xlsx and xls files up to MAX_UPLOAD_MB. Replaces the
    previous distribution on success.
    """
    if file is None or not file.filename:
        logger.info("No file found in request")
        return JSONResponse(status_code=400, content={"message": "No file uploaded", "status": "error"})

    logger.info(f"Receiving list upload: {file.filename} (type: {file.content_type})")

    try:
        extension = validate_extension(file.filename)
        destination = await asyncio.to_thread(
            store_upload, file.file, settings.UPLOAD_DIR, file.filename, settings.max_upload_bytes
        )
    except IngestionError as e:
        logger.warning(f"Upload rejected [{e.kind}]: {e.message}")
        return error_response(e)
    except OSError as e:
        logger.error(f"Failed to store upload {file.filename}: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to store uploaded file")

    result = await ingestor.ingest(str(destination), extension)

    if not result.ok:
        return error_response(result.error)

    logger.info(f"List distributed in {result.processing_time_ms}ms: {result.summary.to_dict()}")
    return {
        "message": "Data distributed successfully",
        "summary": result.summary.to_dict()
    }


@router.get("")
async def get_lists():
    """Current distribution: one entry per agent with its contact records."""
    try:
        distributions = await DistributionRepository.list_distributions()
    except Exception as e:
        logger.error(f"Error fetching lists: {str(e)}")
        raise HTTPException(status_code=500, detail="Error fetching lists")

    lists = []
    for distribution in distributions:
        item = distribution.to_dict()
        item["data"] = [CanonicalRecord.from_dict(record).to_dict() for record in item["data"]]
        lists.append(item)

    logger.info(f"Found {len(lists)} lists")
    return lists
