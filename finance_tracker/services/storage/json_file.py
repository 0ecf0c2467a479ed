"""
JSON File Storage Implementation

DESIGN DECISION: The finance document is one JSON file because:
1. It is a single-user tracker with modest data
2. The file is human readable and trivially backed up
3. Browser and assistant clients already speak this camelCase shape

TRADEOFFS:
- Whole-document rewrites (fine at personal scale)
- No concurrency control (documented; last writer wins)

Writes go to a temporary file first and are moved into place, so a
crash mid-write never leaves a half-written document behind.
"""

import os
import tempfile
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from finance_tracker.audit import AuditLogger, get_logger
from finance_tracker.config import get_settings
from finance_tracker.models.audit import AuditEventBuilder
from finance_tracker.models.finance import (
    FinanceDocument,
    create_empty_document,
    utcnow,
)
from finance_tracker.services.storage.interface import (
    FinanceStorageInterface,
    StorageWriteError,
)


class JsonFileStorage(FinanceStorageInterface):
    """Finance document stored as a single JSON file."""

    def __init__(
        self,
        path: Optional[Path] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        settings = get_settings().storage
        self._path = Path(path) if path is not None else settings.data_file
        self._indent = settings.indent
        self._audit_logger = audit_logger or AuditLogger()
        self._logger = get_logger(__name__)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> FinanceDocument:
        if self._path.exists():
            try:
                raw = self._path.read_text(encoding="utf-8")
                return FinanceDocument.model_validate_json(raw)
            except (OSError, ValidationError, ValueError) as e:
                # Corruption is recovered locally, never surfaced
                self._audit_logger.log(AuditEventBuilder.storage_recovered(
                    path=str(self._path),
                    error_message=str(e),
                ))

        document = create_empty_document()
        try:
            self.save(document)
        except StorageWriteError as e:
            # load() never raises; the next save will report the problem
            self._logger.warning("empty_document_not_persisted", error=str(e))
        return document

    def save(self, document: FinanceDocument) -> None:
        document.last_updated = utcnow()
        payload = document.to_json(indent=self._indent or None)

        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent,
                prefix=f".{self._path.name}.",
                suffix=".tmp",
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(payload)
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageWriteError(
                f"Failed to write finance document to {self._path}: {e}"
            ) from e
