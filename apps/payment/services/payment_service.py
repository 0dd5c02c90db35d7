import logging
from datetime import datetime, timedelta
from typing import Optional

from django.conf import settings
from django.core.exceptions import ValidationError
from django.utils import timezone

from apps.payment.models import Payment, PaymentStatus
from core.exceptions import PaymentRequiredException

logger = logging.getLogger(__name__)


class PaymentService:
    """
    Pre-payment oracle consumed by the appointment scheduler
    """

    @staticmethod
    def get_lead_time() -> timedelta:
        """How long before the appointment start a pre-paid item must be settled."""
        return timedelta(hours=settings.AGENDA["PRE_PAYMENT_LEAD_TIME_HOURS"])

    @classmethod
    def is_within_pre_payment_window(cls, start_time: datetime, now: Optional[datetime] = None) -> bool:
        """
        Check whether ``now`` has reached the pre-payment deadline window.

        The window opens ``PRE_PAYMENT_LEAD_TIME_HOURS`` before the appointment
        start; bookings made earlier than that are not asked for payment yet.
        """
        now = now or timezone.now()
        return now >= start_time - cls.get_lead_time()

    @classmethod
    def verify_pre_payment_if_within_window(
        cls, item, start_time: datetime, payment_id=None
    ) -> Optional[Payment]:
        """
        Verify that a pre-paid item has a completed payment when required.

        Args:
            item: The booked item
            start_time: Appointment start
            payment_id: Payment reference supplied by the caller, if any

        Returns:
            The completed Payment, or None when no verification is needed
            (item is not pre-paid, or the window has not opened yet)

        Raises:
            PaymentRequiredException: If the window is open and no completed
                payment is referenced
        """
        if not item.requires_pre_payment:
            return None

        if not cls.is_within_pre_payment_window(start_time):
            return None

        if not payment_id:
            logger.info(f"Pre-payment required for item {item.id} starting {start_time}")
            raise PaymentRequiredException("Pre-payment is required for this item.")

        try:
            payment = Payment.objects.get(id=payment_id)
        except (Payment.DoesNotExist, ValidationError, ValueError):
            raise PaymentRequiredException("Payment not found.")

        if payment.status != PaymentStatus.COMPLETED:
            raise PaymentRequiredException("Payment has not been completed.")

        return payment
