"""
Contact list ingestion orchestrator.

Runs parse -> normalize -> distribute for one uploaded file, removes the
uploaded file on every exit path, and turns failures into a structured
IngestionResult instead of raising.
"""

import asyncio
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol
from contact_distributor.core.logging import setup_logger
from contact_distributor.distribution.engine import (
    AgentLike,
    DistributionStore,
    DistributionSummary,
    distribute,
)
from .dispatcher import read_raw_rows
from .errors import IngestionError, DistributionPersistError
from .normalize import normalize_records
from .uploads import validate_extension, LocalTempFileStore

logger = setup_logger()


class AgentRoster(Protocol):
    async def list_agents(self) -> List[AgentLike]:
        ...


class TempFileStore(Protocol):
    def exists(self, path: str) -> bool:
        ...

    def remove(self, path: str) -> None:
        ...


@dataclass
class IngestionResult:
    """Outcome of one ingestion call: a summary or an error, never both."""
    summary: Optional[DistributionSummary] = None
    error: Optional[IngestionError] = None
    processing_time_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        if self.ok:
            return {
                "status": "success",
                "summary": self.summary.to_dict(),
                "processing_time_ms": self.processing_time_ms
            }
        return {
            "status": "error",
            "error": self.error.to_dict(),
            "processing_time_ms": self.processing_time_ms
        }


class ContactListIngestor:
    """Coordinates the ingestion pipeline for uploaded contact lists."""

    def __init__(
        self,
        roster: AgentRoster,
        distributions: DistributionStore,
        temp_files: Optional[TempFileStore] = None
    ):
        self.roster = roster
        self.distributions = distributions
        self.temp_files = temp_files or LocalTempFileStore()

    async def ingest(self, file_path: str, declared_extension: str) -> IngestionResult:
        """
        Ingest one uploaded contact file.

        Args:
            file_path: Path of the uploaded (temporary) file
            declared_extension: Extension or original file name from the upload

        Returns:
            IngestionResult with the DistributionSummary or the IngestionError
        """
        start_time = time.time()
        name = Path(file_path).name

        try:
            logger.info(f"Starting contact list ingestion - File: {name}")
            summary = await self._run(file_path, declared_extension)
            return IngestionResult(
                summary=summary,
                processing_time_ms=int((time.time() - start_time) * 1000)
            )
        except IngestionError as e:
            logger.error(f"Ingestion failed for {name} [{e.kind}]: {e.message}")
            return IngestionResult(
                error=e,
                processing_time_ms=int((time.time() - start_time) * 1000)
            )
        finally:
            self._discard(file_path)

    async def _run(self, file_path: str, declared_extension: str) -> DistributionSummary:
        # Step 1: extension check, before the file is touched
        extension = validate_extension(declared_extension)

        # Step 2: parse; the whole stream is drained before moving on
        logger.info("Step 2: Parsing file...")
        raw_rows = await asyncio.to_thread(read_raw_rows, file_path, extension)

        # Step 3: normalize
        logger.info(f"Step 3: Normalizing {len(raw_rows)} rows...")
        records = normalize_records(raw_rows)

        # Step 4: roster snapshot for this run
        logger.info("Step 4: Loading agents...")
        try:
            agents = list(await self.roster.list_agents())
        except Exception as e:
            logger.error(f"Failed to load agents: {str(e)}")
            raise DistributionPersistError(
                "Failed to load agents",
                details={"stage": "load_agents", "error_type": type(e).__name__}
            ) from e

        # Step 5: distribute
        logger.info(f"Step 5: Distributing {len(records)} records across {len(agents)} agents...")
        return await distribute(records, agents, self.distributions)

    def _discard(self, file_path: str) -> None:
        try:
            if self.temp_files.exists(file_path):
                self.temp_files.remove(file_path)
                logger.info(f"Cleaned up uploaded file: {Path(file_path).name}")
        except OSError as e:
            logger.warning(f"Failed to clean up file {file_path}: {str(e)}")
