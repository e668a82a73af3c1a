"""Ledger of charges that settled without a booking."""

import logging
from datetime import UTC, datetime

from stayflow.schemas.reservation import PartialCommitRecord

logger = logging.getLogger(__name__)


class ReconciliationLedger:
    """Append-only record of partial commits awaiting reconciliation.

    Process-local; entries are written once and never modified.
    """

    def __init__(self):
        self._records: list[PartialCommitRecord] = []

    def record(self, **fields) -> PartialCommitRecord:
        """Append a partial commit.

        Args:
            **fields: PartialCommitRecord fields except recorded_at

        Returns:
            The stored record
        """
        entry = PartialCommitRecord(recorded_at=datetime.now(UTC), **fields)
        self._records.append(entry)
        logger.error(
            "Partial commit: user %s charged %s for property %s (%s to %s) without a booking; key=%s",
            entry.user_id,
            entry.amount,
            entry.property_id,
            entry.check_in,
            entry.check_out,
            entry.idempotency_key,
        )
        return entry

    def for_user(self, user_id: int) -> list[PartialCommitRecord]:
        return [r for r in self._records if r.user_id == user_id]

    def all(self) -> list[PartialCommitRecord]:
        return list(self._records)
