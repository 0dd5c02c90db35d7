# apps/bookingapp/tests/test_services.py
import uuid
from datetime import date, time

from django.test import TestCase

from apps.bookingapp.models import AppointmentStatus
from apps.bookingapp.services.availability_service import (
    CLOSED,
    NO_SCHEDULE,
    OUTSIDE_HOURS,
    OVERLAPPING_APPOINTMENT,
    AvailabilityService,
)
from apps.bookingapp.tests.factories import AppointmentFactory
from apps.bookingapp.tests.fixtures import BOOKING_DAY, BookingFixtureMixin, at
from apps.companiesapp.tests.factories import ChairRoomFactory
from apps.scheduleapp.enums import ResourceKind
from apps.scheduleapp.tests.factories import (
    ChairRoomScheduleEntryFactory,
    ProfessionalScheduleEntryFactory,
    RecurringAssignmentFactory,
    SingleAssignmentFactory,
)
from core.exceptions import InvalidRequestException, ResourceNotFoundException


class AvailabilityServiceTest(BookingFixtureMixin, TestCase):
    """Test cases for the fail-closed availability evaluator"""

    def check(self, start, end, day=BOOKING_DAY, **kwargs):
        return AvailabilityService.check_availability(
            ResourceKind.PROFESSIONAL, self.professional.id, day, start, end, **kwargs
        )

    def test_inside_window_is_available(self):
        result = self.check(time(9, 0), time(17, 0))

        self.assertTrue(result)
        self.assertIsNone(result.reason)

    def test_missing_entry_is_unavailable(self):
        self.assertEqual(self.check(time(9, 0), time(10, 0), day=date(2025, 3, 11)).reason, NO_SCHEDULE)

    def test_closed_entry_is_unavailable(self):
        self.professional.schedule_entries.update(closed=True)

        self.assertEqual(self.check(time(9, 0), time(10, 0)).reason, CLOSED)

    def test_outside_window_is_unavailable(self):
        self.assertEqual(self.check(time(7, 30), time(8, 30)).reason, OUTSIDE_HOURS)
        self.assertEqual(self.check(time(16, 30), time(17, 30)).reason, OUTSIDE_HOURS)

    def test_overlap_is_half_open(self):
        appointment = AppointmentFactory(professional=self.professional, start_time=at(10), end_time=at(11))

        self.assertEqual(self.check(time(10, 30), time(11, 30)).reason, OVERLAPPING_APPOINTMENT)
        self.assertEqual(self.check(time(9, 0), time(12, 0)).reason, OVERLAPPING_APPOINTMENT)
        self.assertTrue(self.check(time(11, 0), time(12, 0)))
        self.assertTrue(self.check(time(9, 0), time(10, 0)))
        self.assertTrue(self.check(time(10, 30), time(11, 30), exclude_appointment_id=appointment.id))

    def test_cancelled_appointment_does_not_overlap(self):
        AppointmentFactory(
            professional=self.professional,
            start_time=at(10),
            end_time=at(11),
            status=AppointmentStatus.CANCELLED,
        )

        self.assertTrue(AvailabilityService.is_available(
            ResourceKind.PROFESSIONAL, self.professional.id, BOOKING_DAY, time(10, 0), time(11, 0)
        ))


    def test_subsidiary_hosts_parallel_appointments(self):
        AppointmentFactory(
            subsidiary=self.subsidiary, professional=self.professional, start_time=at(10), end_time=at(11)
        )

        result = AvailabilityService.check_availability(
            ResourceKind.SUBSIDIARY, self.subsidiary.id, BOOKING_DAY, time(10, 0), time(11, 0)
        )

        self.assertTrue(result)


class AvailableSlotsTest(BookingFixtureMixin, TestCase):
    """Test cases for the slot finder"""

    def test_slots_follow_intersected_windows(self):
        slots = AvailabilityService.find_available_slots(
            self.subsidiary.id, self.professional.id, BOOKING_DAY, BOOKING_DAY, duration_minutes=60
        )

        # Professional 08:00-17:00 inside subsidiary 08:00-18:00
        self.assertEqual(slots[0], {"start": at(8), "end": at(9)})
        self.assertEqual(slots[-1], {"start": at(16), "end": at(17)})
        self.assertEqual(len(slots), 17)

    def test_booked_intervals_are_skipped(self):
        AppointmentFactory(professional=self.professional, start_time=at(10), end_time=at(11))

        slots = AvailabilityService.find_available_slots(
            self.subsidiary.id, self.professional.id, BOOKING_DAY, BOOKING_DAY, duration_minutes=60, step_minutes=60
        )

        starts = [slot["start"] for slot in slots]
        self.assertNotIn(at(10), starts)
        self.assertIn(at(9), starts)
        self.assertIn(at(11), starts)

    def test_chair_room_narrows_window(self):
        self.chair_room.schedule_entries.update(open_time=time(13, 0), close_time=time(15, 0))

        slots = AvailabilityService.find_available_slots(
            self.subsidiary.id,
            self.professional.id,
            BOOKING_DAY,
            BOOKING_DAY,
            duration_minutes=60,
            chair_room_id=self.chair_room.id,
        )

        self.assertEqual([slot["start"] for slot in slots], [at(13), at(13, 30), at(14)])

    def test_days_without_entries_have_no_slots(self):
        ProfessionalScheduleEntryFactory(professional=self.professional, date=date(2025, 3, 11))

        slots = AvailabilityService.find_available_slots(
            self.subsidiary.id, self.professional.id, date(2025, 3, 11), date(2025, 3, 11), duration_minutes=30
        )

        self.assertEqual(slots, [])

    def test_invalid_arguments(self):
        with self.assertRaises(InvalidRequestException):
            AvailabilityService.find_available_slots(
                self.subsidiary.id, self.professional.id, BOOKING_DAY, BOOKING_DAY, duration_minutes=0
            )
        with self.assertRaises(ResourceNotFoundException):
            AvailabilityService.find_available_slots(
                self.subsidiary.id, uuid.uuid4(), BOOKING_DAY, BOOKING_DAY, duration_minutes=30
            )

    def test_assigned_professional_has_no_slots_without_room(self):
        RecurringAssignmentFactory(professional=self.professional, chair_room=self.chair_room, weekday=1)

        slots = AvailabilityService.find_available_slots(
            self.subsidiary.id, self.professional.id, BOOKING_DAY, BOOKING_DAY, duration_minutes=30
        )

        self.assertEqual(slots, [])

    def test_room_slots_follow_assignment(self):
        SingleAssignmentFactory(
            professional=self.professional,
            chair_room=self.chair_room,
            date=BOOKING_DAY,
            start_time=time(9, 0),
            end_time=time(11, 0),
        )

        slots = AvailabilityService.find_available_slots(
            self.subsidiary.id,
            self.professional.id,
            BOOKING_DAY,
            BOOKING_DAY,
            duration_minutes=60,
            chair_room_id=self.chair_room.id,
            step_minutes=60,
        )

        # Coverage is inclusive at both assignment boundaries
        self.assertEqual([slot["start"] for slot in slots], [at(8), at(9), at(10), at(11)])

    def test_room_assigned_to_someone_else_is_skipped(self):
        other_room = ChairRoomFactory(subsidiary=self.subsidiary)
        ChairRoomScheduleEntryFactory(chair_room=other_room, date=BOOKING_DAY)
        RecurringAssignmentFactory(professional=self.professional, chair_room=other_room, weekday=1)

        slots = AvailabilityService.find_available_slots(
            self.subsidiary.id,
            self.professional.id,
            BOOKING_DAY,
            BOOKING_DAY,
            duration_minutes=30,
            chair_room_id=self.chair_room.id,
        )

        self.assertEqual(slots, [])
