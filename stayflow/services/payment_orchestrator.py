"""Charge-then-reserve orchestration.

Flow:
1. Charge the user's account for the stay total
2. Only if the charge settled, create the booking

The two calls are not atomic. A failure between them leaves the user charged
without a booking; that outcome is raised as PartialCommitError and written
to the reconciliation ledger. It is never retried here.
"""

import logging

from stayflow.core.exceptions import (
    AppException,
    PartialCommitError,
    PaymentFailed,
    ValidationError,
)
from stayflow.core.idempotency import generate_idempotency_key
from stayflow.domain.reservation_stepper import ReservationDraft
from stayflow.gateways.rental_api import RentalApiClient
from stayflow.schemas.booking import Booking
from stayflow.services.reconciliation_service import ReconciliationLedger
from stayflow.utils.validators import mask_sensitive_data, normalize_account_reference

logger = logging.getLogger(__name__)


def require_account_reference(account_reference: str | None) -> str:
    """Normalized account reference, or ValidationError if empty."""
    reference = normalize_account_reference(account_reference)
    if not reference:
        raise ValidationError("Please enter your account number")
    return reference


class PaymentOrchestrator:
    """Runs the two-phase payment and reservation protocol."""

    def __init__(self, client: RentalApiClient, ledger: ReconciliationLedger):
        self.client = client
        self.ledger = ledger

    async def execute(self, draft: ReservationDraft, account_reference: str) -> Booking:
        """Charge for a draft, then create its booking.

        Args:
            draft: Snapshot taken when the workflow entered SUBMITTING
            account_reference: Account to charge

        Returns:
            The created booking

        Raises:
            ValidationError: Missing account reference or incomplete draft
            PaymentFailed: Charge did not settle; no booking was attempted
            PartialCommitError: Charge settled but the booking was not created
            AppException: Charge call itself failed; no booking was attempted
        """
        reference = require_account_reference(account_reference)
        amount = draft.total_amount
        if amount is None or draft.check_in is None or draft.check_out is None:
            raise ValidationError("Reservation dates are incomplete")

        key = draft.idempotency_key or generate_idempotency_key(
            "reservation_attempt", draft.draft_id, {"attempt": draft.attempt}
        )

        logger.info(
            "Charging %s to account %s for property %s (draft %s, attempt %s)",
            amount,
            mask_sensitive_data(reference),
            draft.property_id,
            draft.draft_id,
            draft.attempt,
        )
        settled = await self.client.charge(draft.user_id, reference, amount, key)
        if not settled:
            logger.info("Charge declined for draft %s", draft.draft_id)
            raise PaymentFailed("Payment was declined. No booking was made.")

        try:
            booking = await self.client.create_booking(
                property_id=draft.property_id,
                user_id=draft.user_id,
                check_in=draft.check_in,
                check_out=draft.check_out,
                extra_bedding=draft.extra_bedding,
                deep_clean=draft.deep_clean,
                idempotency_key=key,
            )
        except Exception as exc:
            # The charge has settled; every failure from here on is a partial commit
            failure = exc.detail if isinstance(exc, AppException) else repr(exc)
            context = {
                "idempotency_key": key,
                "user_id": draft.user_id,
                "property_id": draft.property_id,
                "amount": amount,
                "check_in": draft.check_in,
                "check_out": draft.check_out,
                "extra_bedding": draft.extra_bedding,
                "deep_clean": draft.deep_clean,
            }
            record = self.ledger.record(**context, failure=str(failure))
            raise PartialCommitError(record.model_dump(mode="json"), reason=str(failure)) from exc

        logger.info(
            "Booking %s created for user %s after charge of %s",
            booking.booking_id,
            draft.user_id,
            amount,
        )
        return booking
