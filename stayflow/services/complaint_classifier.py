"""Complaint classification into active and resolved."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from stayflow.domain.complaint_state import is_resolved
from stayflow.schemas.complaint import Complaint


@dataclass(frozen=True)
class ComplaintBuckets:
    """Complaints split by resolution, newest first."""

    active: tuple[Complaint, ...]
    resolved: tuple[Complaint, ...]


def _by_created_at(complaint: Complaint) -> datetime:
    return complaint.created_at


class ComplaintClassifier:
    """Partition a user's complaints."""

    def classify(self, complaints: Iterable[Complaint]) -> ComplaintBuckets:
        active: list[Complaint] = []
        resolved: list[Complaint] = []
        for complaint in complaints:
            (resolved if is_resolved(complaint.status) else active).append(complaint)

        return ComplaintBuckets(
            active=tuple(sorted(active, key=_by_created_at, reverse=True)),
            resolved=tuple(sorted(resolved, key=_by_created_at, reverse=True)),
        )


# Singleton instance
complaint_classifier = ComplaintClassifier()
