"""Complaint listing and submission."""

import logging

from stayflow.core.exceptions import AppException
from stayflow.core.idempotency import InFlightRegistry
from stayflow.gateways.rental_api import RentalApiClient
from stayflow.schemas.complaint import ComplaintCreate, ComplaintOverview
from stayflow.services.booking_service import BookingService
from stayflow.services.complaint_classifier import ComplaintClassifier, complaint_classifier

logger = logging.getLogger(__name__)


class ComplaintService:
    """Loads and submits a user's complaints."""

    def __init__(
        self,
        client: RentalApiClient,
        booking_service: BookingService,
        in_flight: InFlightRegistry,
        classifier: ComplaintClassifier = complaint_classifier,
    ):
        self.client = client
        self.booking_service = booking_service
        self.in_flight = in_flight
        self.classifier = classifier

    async def list(self, user_id: int) -> ComplaintOverview:
        complaints = await self.client.fetch_complaints(user_id)
        buckets = self.classifier.classify(complaints)
        return ComplaintOverview(active=list(buckets.active), resolved=list(buckets.resolved))

    async def submit(self, user_id: int, complaint: ComplaintCreate) -> ComplaintOverview | None:
        """File a complaint, optionally about one of the user's bookings.

        Returns the reloaded complaints, or None if only the reload failed.

        Raises:
            ConflictError: A complaint from this user is already being sent
            NotFoundError: Linked booking does not exist
            AuthorizationError: Linked booking belongs to another user
        """
        with self.in_flight.claim(f"complaint:{user_id}", "Your previous complaint is still being sent"):
            if complaint.booking_id is not None:
                bookings = await self.booking_service.fetch(user_id)
                self.booking_service.find_owned(bookings, user_id, complaint.booking_id)

            await self.client.submit_complaint(user_id, complaint)
            logger.info(
                "User %s filed a %s complaint (booking %s)",
                user_id,
                complaint.complaint_type.value,
                complaint.booking_id,
            )

        try:
            return await self.list(user_id)
        except AppException as exc:
            logger.warning("Reload after complaint from user %s failed: %s", user_id, exc.detail)
            return None
