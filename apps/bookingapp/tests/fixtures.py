# apps/bookingapp/tests/fixtures.py
from datetime import date, datetime, time
from datetime import timezone as dt_timezone
from unittest.mock import patch

from django.utils import timezone

from apps.companiesapp.tests.factories import ChairRoomFactory, SubsidiaryFactory
from apps.customersapp.tests.factories import CustomerFactory
from apps.professionalsapp.tests.factories import ProfessionalFactory
from apps.serviceapp.tests.factories import ItemFactory
from apps.scheduleapp.tests.factories import (
    ChairRoomScheduleEntryFactory,
    ProfessionalScheduleEntryFactory,
    SubsidiaryScheduleEntryFactory,
)

BOOKING_DAY = date(2025, 3, 10)


def at(hour, minute=0, day=BOOKING_DAY):
    """Aware datetime on the booking day"""
    return timezone.make_aware(datetime.combine(day, time(hour, minute)))


class BookingFixtureMixin:
    """
    A subsidiary open 08:00-18:00 and a professional working 08:00-17:00 on
    Monday 2025-03-10, with "now" frozen a week earlier.
    """

    now = datetime(2025, 3, 3, 12, 0, tzinfo=dt_timezone.utc)

    def setUp(self):
        super().setUp()
        self.freeze_time(self.now)

        self.subsidiary = SubsidiaryFactory()
        self.professional = ProfessionalFactory(subsidiary=self.subsidiary)
        self.customer = CustomerFactory()
        self.item = ItemFactory(subsidiary=self.subsidiary, duration_minutes=30)
        self.chair_room = ChairRoomFactory(subsidiary=self.subsidiary)

        SubsidiaryScheduleEntryFactory(
            subsidiary=self.subsidiary, date=BOOKING_DAY, open_time=time(8, 0), close_time=time(18, 0)
        )
        ProfessionalScheduleEntryFactory(
            professional=self.professional, date=BOOKING_DAY, open_time=time(8, 0), close_time=time(17, 0)
        )
        ChairRoomScheduleEntryFactory(
            chair_room=self.chair_room, date=BOOKING_DAY, open_time=time(8, 0), close_time=time(18, 0)
        )

    def freeze_time(self, moment):
        patcher = patch("django.utils.timezone.now", return_value=moment)
        patcher.start()
        self.addCleanup(patcher.stop)
