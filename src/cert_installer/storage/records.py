"""Durable ordered collection of installed key pair records."""

import json
import logging
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError

from ..core.models import CertificateRecord
from .kv import KeyValueStore

logger = logging.getLogger(__name__)

RECORDS_KEY = "installed_certificates"


class RecordLoadResult(BaseModel):
    """Records read from storage plus how many stored entries were unreadable."""

    records: list[CertificateRecord] = Field(default_factory=list)
    skipped: int = Field(default=0, description="Malformed entries ignored")


class CertificateRecordStore:
    """Keeps a record for every key pair this component installed.

    The privileged store cannot enumerate key pairs, so this collection is
    the only listing source for them. Malformed stored entries are skipped on
    load; the count is reported in ``RecordLoadResult.skipped``.
    """

    def __init__(self, store: KeyValueStore):
        self.store = store

    def load(self) -> RecordLoadResult:
        return self._load(self.store)

    def all(self) -> list[CertificateRecord]:
        return self.load().records

    def find(self, alias: str) -> Optional[CertificateRecord]:
        for record in self.all():
            if record.alias == alias:
                return record
        return None

    def append(self, record: CertificateRecord) -> None:
        with self.store.transaction() as store:
            records = self._load(store).records
            records.append(record)
            self._save(store, records)
        logger.debug("Recorded key pair %s", record.alias)

    def remove_by_alias(self, alias: str) -> int:
        """Remove every record with ``alias``.

        Returns:
            Number of records removed
        """
        with self.store.transaction() as store:
            records = self._load(store).records
            kept = [r for r in records if r.alias != alias]
            removed = len(records) - len(kept)
            if removed:
                self._save(store, kept)
        return removed

    def count(self) -> int:
        return len(self.all())

    @staticmethod
    def _save(store: KeyValueStore, records: list[CertificateRecord]) -> None:
        store.put(RECORDS_KEY, [r.model_dump(mode="json") for r in records])

    @staticmethod
    def _load(store: KeyValueStore) -> RecordLoadResult:
        raw: Any = store.get(RECORDS_KEY)
        if raw is None:
            return RecordLoadResult()

        # Older state may hold the collection as a JSON string
        if isinstance(raw, str):
            try:
                raw = json.loads(raw)
            except json.JSONDecodeError:
                logger.warning("Stored certificate collection is not valid JSON; ignoring it")
                return RecordLoadResult(skipped=1)

        if not isinstance(raw, list):
            logger.warning("Stored certificate collection is not a list; ignoring it")
            return RecordLoadResult(skipped=1)

        result = RecordLoadResult()
        for index, entry in enumerate(raw):
            try:
                result.records.append(CertificateRecord.model_validate(entry))
            except ValidationError as e:
                result.skipped += 1
                logger.warning(
                    "Skipping malformed certificate record at index %d: %s",
                    index,
                    e.errors(include_input=False),
                )
        return result
