"""Reservation workflow sessions.

Each workflow instance owns one stepper and its draft. Sessions are keyed by
draft ID and scoped to the acting user; they live in process memory and are
dropped on success, on abort, or after sitting idle longer than the
configured TTL.
"""

import logging
from datetime import date, datetime, timedelta
from uuid import uuid4

from stayflow.config import settings
from stayflow.core.exceptions import AppException, NotFoundError
from stayflow.domain.reservation_stepper import ReservationDraft, ReservationStepper, StepperState
from stayflow.gateways.rental_api import RentalApiClient
from stayflow.schemas.reservation import DraftResponse, ReservationResult
from stayflow.services.booking_service import BookingService
from stayflow.services.payment_orchestrator import PaymentOrchestrator, require_account_reference
from stayflow.utils.clock import Clock, now as current_time

logger = logging.getLogger(__name__)


def draft_response(stepper: ReservationStepper) -> DraftResponse:
    """Serializable view of a workflow's step and draft."""
    draft = stepper.draft
    return DraftResponse(
        draft_id=draft.draft_id,
        state=stepper.state.value,
        property_id=draft.property_id,
        property_name=draft.property_name,
        nightly_rate=draft.nightly_rate,
        check_in=draft.check_in,
        check_out=draft.check_out,
        extra_bedding=draft.extra_bedding,
        deep_clean=draft.deep_clean,
        nights=draft.nights,
        total_amount=draft.total_amount,
        last_error=stepper.last_error,
    )


class ReservationService:
    """Drives reservation steppers on behalf of users."""

    def __init__(
        self,
        client: RentalApiClient,
        orchestrator: PaymentOrchestrator,
        booking_service: BookingService,
        clock: Clock = current_time,
        ttl: timedelta | None = None,
    ):
        self.client = client
        self.orchestrator = orchestrator
        self.booking_service = booking_service
        self.clock = clock
        self.ttl = ttl or timedelta(minutes=settings.reservation_ttl_minutes)
        self._sessions: dict[str, ReservationStepper] = {}

    def evict_expired(self, now: datetime) -> int:
        """Drop idle workflows; returns how many were dropped.

        A workflow with a submission outstanding is never dropped.
        """
        expired = [
            draft_id
            for draft_id, stepper in self._sessions.items()
            if stepper.state != StepperState.SUBMITTING
            and stepper.last_active is not None
            and now - stepper.last_active > self.ttl
        ]
        for draft_id in expired:
            stepper = self._sessions.pop(draft_id)
            logger.info(
                "Reservation %s of user %s expired (pending reconciliation: %s)",
                draft_id,
                stepper.draft.user_id,
                stepper.reconciliation_pending,
            )
        return len(expired)

    async def start(self, user_id: int, property_id: int) -> ReservationStepper:
        """Open a workflow with a snapshot of the property's nightly rate."""
        self.evict_expired(self.clock())
        prop = await self.client.fetch_property(property_id)
        draft = ReservationDraft(
            draft_id=uuid4().hex,
            user_id=user_id,
            property_id=prop.property_id,
            nightly_rate=prop.nightly_rate,
            property_name=prop.name,
        )
        stepper = ReservationStepper(draft, opened_at=self.clock())
        self._sessions[draft.draft_id] = stepper
        logger.info(
            "Reservation %s opened by user %s for property %s at %s/night",
            draft.draft_id,
            user_id,
            prop.property_id,
            prop.nightly_rate,
        )
        return stepper

    def get(self, user_id: int, draft_id: str) -> ReservationStepper:
        """Workflow owned by user.

        Raises:
            NotFoundError: Unknown or expired draft, or a draft owned by someone else
        """
        now = self.clock()
        self.evict_expired(now)
        stepper = self._sessions.get(draft_id)
        if stepper is None or stepper.draft.user_id != user_id:
            raise NotFoundError("Reservation", draft_id)
        stepper.last_active = now
        return stepper

    def set_dates(
        self, user_id: int, draft_id: str, check_in: date | None, check_out: date | None
    ) -> ReservationStepper:
        stepper = self.get(user_id, draft_id)
        stepper.set_dates(check_in, check_out)
        return stepper

    def set_addons(
        self, user_id: int, draft_id: str, extra_bedding: bool, deep_clean: bool
    ) -> ReservationStepper:
        stepper = self.get(user_id, draft_id)
        stepper.set_addons(extra_bedding, deep_clean)
        return stepper

    def next(self, user_id: int, draft_id: str) -> ReservationStepper:
        stepper = self.get(user_id, draft_id)
        stepper.next(self.clock())
        return stepper

    def back(self, user_id: int, draft_id: str) -> ReservationStepper:
        stepper = self.get(user_id, draft_id)
        stepper.back()
        return stepper

    def abort(self, user_id: int, draft_id: str) -> None:
        """Discard the draft and close the workflow."""
        stepper = self.get(user_id, draft_id)
        stepper.abort()
        self._sessions.pop(draft_id, None)
        logger.info("Reservation %s aborted by user %s", draft_id, user_id)

    async def submit(
        self, user_id: int, draft_id: str, account_reference: str
    ) -> ReservationResult:
        """Pay for and create the booking, then rebuild the booking lists.

        On any failure the workflow returns to CONFIRM with the error kept on
        the stepper, and the error is re-raised.
        """
        stepper = self.get(user_id, draft_id)
        reference = require_account_reference(account_reference)
        snapshot = stepper.begin_submit(self.clock())

        try:
            booking = await self.orchestrator.execute(snapshot, reference)
        except AppException as exc:
            stepper.fail_submit(exc)
            raise
        except Exception:
            stepper.fail_submit(AppException())
            raise

        stepper.complete_submit(booking)
        self._sessions.pop(draft_id, None)

        # The booking exists; a failed reload only leaves the lists missing
        overview = await self.booking_service.reload_after(user_id, f"reservation {draft_id}")

        return ReservationResult(booking=booking, bookings=overview)
