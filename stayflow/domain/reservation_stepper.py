"""Reservation workflow state machine.

Steps: DATES → ADDONS → CONFIRM → SUBMITTING → DONE.

Every move goes through STEPPER_TRANSITIONS; a (state, event) pair that is
not in the table is rejected. Leaving DATES and entering SUBMITTING both
require the date rules to pass, so no path reaches submission with dates
that were never checked.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from enum import Enum
from typing import TYPE_CHECKING

from stayflow.core.exceptions import (
    AppException,
    ConflictError,
    InvalidStepTransition,
    PartialCommitError,
)
from stayflow.core.idempotency import generate_idempotency_key
from stayflow.domain import date_rules, pricing

if TYPE_CHECKING:
    from stayflow.schemas.booking import Booking


class StepperState(str, Enum):
    """Reservation workflow steps."""

    DATES = "DATES"
    ADDONS = "ADDONS"
    CONFIRM = "CONFIRM"
    SUBMITTING = "SUBMITTING"
    DONE = "DONE"


class StepperEvent(str, Enum):
    """Inputs that move the workflow."""

    NEXT = "next"
    BACK = "back"
    SUBMIT = "submit"
    SUBMIT_SUCCEEDED = "complete"
    SUBMIT_FAILED = "fail"
    ABORT = "abort"


STEPPER_TRANSITIONS: dict[tuple[StepperState, StepperEvent], StepperState] = {
    (StepperState.DATES, StepperEvent.NEXT): StepperState.ADDONS,
    (StepperState.ADDONS, StepperEvent.NEXT): StepperState.CONFIRM,
    (StepperState.ADDONS, StepperEvent.BACK): StepperState.DATES,
    (StepperState.CONFIRM, StepperEvent.BACK): StepperState.ADDONS,
    (StepperState.CONFIRM, StepperEvent.SUBMIT): StepperState.SUBMITTING,
    (StepperState.SUBMITTING, StepperEvent.SUBMIT_SUCCEEDED): StepperState.DONE,
    (StepperState.SUBMITTING, StepperEvent.SUBMIT_FAILED): StepperState.CONFIRM,
    # A request is outstanding while SUBMITTING, so abort is not offered there
    (StepperState.DATES, StepperEvent.ABORT): StepperState.DATES,
    (StepperState.ADDONS, StepperEvent.ABORT): StepperState.DATES,
    (StepperState.CONFIRM, StepperEvent.ABORT): StepperState.DATES,
    (StepperState.DONE, StepperEvent.ABORT): StepperState.DATES,
}

# Transitions that are only taken when the date rules pass
DATE_GUARDED = frozenset({
    (StepperState.DATES, StepperEvent.NEXT),
    (StepperState.CONFIRM, StepperEvent.SUBMIT),
})


@dataclass
class ReservationDraft:
    """Unpersisted candidate booking built by one workflow instance."""

    draft_id: str
    user_id: int
    property_id: int
    nightly_rate: int
    property_name: str | None = None
    check_in: date | None = None
    check_out: date | None = None
    extra_bedding: bool = False
    deep_clean: bool = False
    attempt: int = 0
    idempotency_key: str | None = None

    @property
    def nights(self) -> int | None:
        if self.check_in is None or self.check_out is None or self.check_out <= self.check_in:
            return None
        return date_rules.nights(self.check_in, self.check_out)

    @property
    def total_amount(self) -> int | None:
        nights = self.nights
        if nights is None:
            return None
        return pricing.total(self.nightly_rate, nights)

    def quote(self) -> pricing.PriceQuote | None:
        nights = self.nights
        if nights is None:
            return None
        return pricing.quote(self.nightly_rate, nights, self.extra_bedding, self.deep_clean)

    def fresh(self) -> ReservationDraft:
        """Empty draft for the same property and rate snapshot."""
        return ReservationDraft(
            draft_id=self.draft_id,
            user_id=self.user_id,
            property_id=self.property_id,
            nightly_rate=self.nightly_rate,
            property_name=self.property_name,
        )


class ReservationStepper:
    """Gated three-step reservation workflow around a single draft."""

    def __init__(self, draft: ReservationDraft, opened_at: datetime | None = None):
        self.draft = draft
        # Last time the owner touched this workflow; drives idle expiry
        self.last_active = opened_at
        self.state = StepperState.DATES
        self.last_error: str | None = None
        self.booking: Booking | None = None
        # Set once a charge went through without a booking
        self.reconciliation_pending = False

    def _transition(self, event: StepperEvent) -> StepperState:
        target = STEPPER_TRANSITIONS.get((self.state, event))
        if target is None:
            raise InvalidStepTransition(self.state.value, event.value)
        return target

    def _check_dates(self, now: date | datetime) -> None:
        date_rules.validate(self.draft.check_in, self.draft.check_out, now).raise_for_violations()

    def set_dates(self, check_in: date | None, check_out: date | None) -> None:
        if self.state != StepperState.DATES:
            raise InvalidStepTransition(self.state.value, "change the dates of")
        self.draft.check_in = check_in
        self.draft.check_out = check_out

    def set_addons(self, extra_bedding: bool, deep_clean: bool) -> None:
        if self.state not in (StepperState.DATES, StepperState.ADDONS):
            raise InvalidStepTransition(self.state.value, "change the add-ons of")
        self.draft.extra_bedding = extra_bedding
        self.draft.deep_clean = deep_clean

    def next(self, now: date | datetime) -> StepperState:
        """Move forward one step.

        Raises:
            DateRangeError: Leaving DATES with dates that break a rule
            InvalidStepTransition: No forward step from the current state
        """
        target = self._transition(StepperEvent.NEXT)
        if (self.state, StepperEvent.NEXT) in DATE_GUARDED:
            self._check_dates(now)
        self.state = target
        self.last_error = None
        return self.state

    def back(self) -> StepperState:
        """Move back one step, keeping entered values."""
        self.state = self._transition(StepperEvent.BACK)
        return self.state

    def begin_submit(self, now: date | datetime) -> ReservationDraft:
        """Enter SUBMITTING and return a snapshot of the draft to submit.

        The state changes before the caller issues any external call, so a
        second submit on the same draft is rejected while the first runs.
        """
        target = self._transition(StepperEvent.SUBMIT)
        if self.reconciliation_pending:
            raise ConflictError(
                "A previous payment for this reservation is awaiting reconciliation"
            )
        if (self.state, StepperEvent.SUBMIT) in DATE_GUARDED:
            self._check_dates(now)

        self.draft.attempt += 1
        self.draft.idempotency_key = generate_idempotency_key(
            "reservation_attempt",
            self.draft.draft_id,
            {"attempt": self.draft.attempt},
        )
        self.state = target
        return replace(self.draft)

    def complete_submit(self, booking: Booking) -> None:
        """Record success and discard the draft."""
        self.state = self._transition(StepperEvent.SUBMIT_SUCCEEDED)
        self.booking = booking
        self.last_error = None
        self.draft = self.draft.fresh()

    def fail_submit(self, error: AppException) -> None:
        """Return to CONFIRM with the error surfaced."""
        self.state = self._transition(StepperEvent.SUBMIT_FAILED)
        self.last_error = error.detail
        if isinstance(error, PartialCommitError):
            self.reconciliation_pending = True

    def abort(self) -> None:
        """Discard the draft and start over at DATES."""
        self.state = self._transition(StepperEvent.ABORT)
        self.draft = self.draft.fresh()
        self.booking = None
        self.last_error = None
        self.reconciliation_pending = False
