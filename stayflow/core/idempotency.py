"""Idempotency keys and in-flight guards for external mutations."""

import hashlib
import json
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import Any

from stayflow.core.exceptions import ConflictError


class InFlightRegistry:
    """Set of operation keys with a request outstanding.

    ``claim`` marks the key busy synchronously, before the caller awaits the
    external call, so a rapid second trigger on the same target is rejected
    instead of issuing a duplicate request. The key is always released when
    the block exits, whatever the outcome.
    """

    def __init__(self):
        self._keys: dict[str, datetime] = {}

    def is_busy(self, key: str) -> bool:
        """Check if a request for key is outstanding."""
        return key in self._keys

    @contextmanager
    def claim(self, key: str, detail: str | None = None) -> Iterator[None]:
        """Hold key for the duration of the block.

        Raises:
            ConflictError: If key is already held
        """
        if key in self._keys:
            raise ConflictError(detail or "A request for this item is already in progress")
        self._keys[key] = datetime.now(UTC)
        try:
            yield
        finally:
            self._keys.pop(key, None)


def generate_idempotency_key(
    operation: str,
    entity_id: str,
    params: dict[str, Any] | None = None,
) -> str:
    """Generate a deterministic idempotency key.

    Args:
        operation: Operation name (e.g., "reservation_attempt")
        entity_id: Primary entity ID
        params: Additional parameters to include in key

    Returns:
        SHA256 hash of operation + entity + params
    """
    key_data = {
        "operation": operation,
        "entity_id": str(entity_id),
        "params": params or {},
    }
    key_str = json.dumps(key_data, sort_keys=True, default=str)
    return hashlib.sha256(key_str.encode()).hexdigest()
