"""
Records management for the income ledger.

This module contains all business logic for record storage and validation.
CLI and MCP tools should be thin wrappers that call these functions.

Design Rationale
----------------

Why a store object instead of module-level state:
    The tax engine is a pure function over a snapshot of records. Keeping
    the ledger behind an explicit RecordStore (load/save lifecycle) means
    callers decide when storage is read, and the engine never touches disk.
    Snapshots are tuples of frozen IncomeRecord models, so a summary can be
    computed while the store keeps changing.

Ordering:
    New records are prepended, so the ledger reads most-recent-entry first.
    The engine does not depend on this order; listing and export do.

Validation happens at entry:
    The engine accepts any numeric amount. Rejecting an empty description,
    a negative amount or a malformed date is the job of add()/validate_entry(),
    which raise ValidationError before anything reaches storage.

Storage format (ledger.json):
    {"version": 1, "records": [{"id", "date", "amount", "description", "type"}, ...]}
"""

import json
import logging
import math
import os
import uuid
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError

from .config import get_data_path, reset_user_settings
from .schemas import IncomeRecord

# Configure logging based on LOG_LEVEL environment variable
_log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, _log_level, logging.INFO),
    format="%(asctime)s.%(msecs)03d %(levelname)s: %(message)s",
    datefmt="%H:%M:%S"
)
logger = logging.getLogger(__name__)

LEDGER_FILENAME = "ledger.json"
LEDGER_VERSION = 1
VALID_TYPES = ("income", "expense")


# =============================================================================
# VALIDATION PIPELINE
# =============================================================================

class ValidationError(Exception):
    """Raised when a record fails validation."""
    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__(f"Validation failed: {'; '.join(errors)}")


def _parse_date(value: Any, errors: List[str]) -> Optional[date]:
    """Accept a date or a YYYY-MM-DD string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return datetime.strptime(value, "%Y-%m-%d").date()
        except ValueError:
            pass
    errors.append(f"date not in YYYY-MM-DD format: {value}")
    return None


def _parse_amount(value: Any, errors: List[str]) -> Optional[float]:
    if isinstance(value, bool):
        errors.append(f"amount must be a number, got: {value!r}")
        return None
    try:
        amount = float(value)
    except (TypeError, ValueError):
        errors.append(f"amount must be a number, got: {value!r}")
        return None
    if not math.isfinite(amount):
        errors.append(f"amount must be finite, got: {value!r}")
        return None
    if amount < 0:
        errors.append(f"amount cannot be negative: {amount}")
        return None
    return amount


def validate_entry(
    entry_date: Any,
    amount: Any,
    description: Any,
    record_type: Any = "income",
) -> Tuple[date, float, str, str]:
    """Validate raw entry fields and return them normalized.

    Returns:
        Tuple of (date, amount, description, record_type)

    Raises:
        ValidationError: With every problem found, not just the first
    """
    errors: List[str] = []

    parsed_date = _parse_date(entry_date, errors)
    parsed_amount = _parse_amount(amount, errors)

    if not isinstance(description, str) or not description.strip():
        errors.append("description is required")

    if record_type not in VALID_TYPES:
        errors.append(f"type must be one of {VALID_TYPES}, got: {record_type}")

    if errors:
        raise ValidationError(errors)

    return parsed_date, parsed_amount, description.strip(), record_type


def _generate_record_id() -> str:
    """Opaque record key; never derived from content so edits can't collide."""
    return uuid.uuid4().hex


# =============================================================================
# STORAGE
# =============================================================================

def get_ledger_path() -> Path:
    """Get the ledger file path (<data_dir>/ledger.json)."""
    return get_data_path() / LEDGER_FILENAME


class RecordStore:
    """File-backed, ordered collection of income records.

    Usage:
        store = RecordStore.open()
        store.add("2026-03-04", 1200, "Monthly subscription")
        summary = compute_tax_summary(store.records(), date(2026, 3, 31))

    Mutating methods save immediately unless autosave=False, in which case
    the caller invokes save() explicitly.
    """

    def __init__(self, path: Optional[Path] = None, autosave: bool = True):
        self.path = Path(path) if path is not None else get_ledger_path()
        self.autosave = autosave
        self._records: List[IncomeRecord] = []

    @classmethod
    def open(cls, path: Optional[Path] = None, autosave: bool = True) -> "RecordStore":
        """Create a store and load the ledger from disk."""
        store = cls(path=path, autosave=autosave)
        store.load()
        return store

    # --- lifecycle ---

    def load(self) -> "RecordStore":
        """(Re)load records from the ledger file. Missing file = empty ledger.

        Raises:
            ValueError: If the ledger file is corrupt
        """
        if not self.path.exists():
            self._records = []
            return self

        try:
            with open(self.path) as f:
                raw = json.load(f)
            self._records = [IncomeRecord.model_validate(r) for r in raw.get("records", [])]
        except (json.JSONDecodeError, PydanticValidationError, AttributeError) as e:
            raise ValueError(f"Corrupt ledger file {self.path}: {e}") from e

        logger.debug("Loaded %d record(s) from %s", len(self._records), self.path)
        return self

    def save(self) -> Path:
        """Write the ledger to disk (atomic replace)."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            "version": LEDGER_VERSION,
            "records": [r.model_dump(mode="json") for r in self._records],
        }
        tmp_path = self.path.with_suffix(".json.tmp")
        with open(tmp_path, "w") as f:
            json.dump(payload, f, indent=2)
        tmp_path.replace(self.path)
        return self.path

    def _changed(self) -> None:
        if self.autosave:
            self.save()

    # --- queries ---

    def records(self) -> Tuple[IncomeRecord, ...]:
        """Immutable snapshot, most recent entry first."""
        return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def get(self, record_id: str) -> Optional[IncomeRecord]:
        for record in self._records:
            if record.id == record_id:
                return record
        return None

    def filter(
        self,
        year: Optional[int] = None,
        month: Optional[int] = None,
        type_filter: Optional[str] = None,
    ) -> Tuple[IncomeRecord, ...]:
        """Records matching year / month (1-12) / type, in ledger order.

        Raises:
            ValueError: If month is given without year or outside 1-12
        """
        if month is not None:
            if year is None:
                raise ValueError("month filter requires a year")
            if not 1 <= month <= 12:
                raise ValueError(f"month must be 1-12, got: {month}")

        results = []
        for record in self._records:
            if year is not None and record.date.year != year:
                continue
            if month is not None and record.date.month != month:
                continue
            if type_filter and record.type != type_filter:
                continue
            results.append(record)
        return tuple(results)

    # --- mutations ---

    def add(
        self,
        entry_date: Any,
        amount: Any,
        description: Any,
        record_type: str = "income",
    ) -> IncomeRecord:
        """Validate and prepend a new record.

        Args:
            entry_date: date or YYYY-MM-DD string
            amount: Non-negative amount in EUR
            description: Non-empty label
            record_type: "income" or "expense"

        Returns:
            The stored record (with its new id)

        Raises:
            ValidationError: If any field is invalid
        """
        parsed_date, parsed_amount, text, kind = validate_entry(
            entry_date, amount, description, record_type
        )
        record = IncomeRecord(
            id=_generate_record_id(),
            date=parsed_date,
            amount=parsed_amount,
            description=text,
            type=kind,
        )
        self._records.insert(0, record)
        self._changed()
        logger.info("Added %s record %s: %s %.2f EUR", kind, record.id, parsed_date, parsed_amount)
        return record

    def remove(self, record_id: str) -> bool:
        """Delete a record by id.

        Returns:
            True if the record was found and deleted, False if not found
        """
        for i, record in enumerate(self._records):
            if record.id == record_id:
                del self._records[i]
                self._changed()
                logger.info("Removed record %s", record_id)
                return True
        return False

    def clear(self) -> int:
        """Delete all records.

        Returns:
            Number of records deleted
        """
        count = len(self._records)
        self._records = []
        self._changed()
        logger.info("Cleared %d record(s)", count)
        return count


def find_by_prefix(store: RecordStore, prefix: str) -> List[IncomeRecord]:
    """Records whose id starts with `prefix` (CLI shows shortened ids)."""
    return [r for r in store.records() if r.id.startswith(prefix)]


def clear_data(store: Optional[RecordStore] = None) -> Dict[str, int]:
    """Reset the ledger and the profile to their empty/default state.

    Returns:
        Dict with the number of records deleted
    """
    if store is None:
        store = RecordStore.open()
    count = store.clear()
    reset_user_settings()
    return {"records_deleted": count}
