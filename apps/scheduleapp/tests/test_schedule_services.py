# apps/scheduleapp/tests/test_schedule_services.py
import uuid
from datetime import date, time

from django.test import TestCase

from apps.companiesapp.tests.factories import ChairRoomFactory, SubsidiaryFactory
from apps.professionalsapp.tests.factories import ProfessionalFactory
from apps.scheduleapp.enums import ResourceKind
from apps.scheduleapp.models import ProfessionalScheduleEntry, SubsidiaryScheduleEntry
from apps.scheduleapp.services.conflict_service import ConflictService
from apps.scheduleapp.services.recurring_schedule_service import (
    DaySchedule,
    RecurringScheduleService,
)
from apps.scheduleapp.services.schedule_service import ScheduleService
from apps.scheduleapp.tests.factories import (
    ProfessionalScheduleEntryFactory,
    SubsidiaryScheduleEntryFactory,
)
from core.exceptions import (
    InvalidRequestException,
    InvalidWindowException,
    ResourceNotFoundException,
    ScheduleConflictException,
)

MONDAY = date(2025, 3, 10)


class ScheduleServiceTest(TestCase):
    """Test cases for the per-date schedule materializer"""

    def setUp(self):
        self.subsidiary = SubsidiaryFactory()
        self.professional = ProfessionalFactory(subsidiary=self.subsidiary)

    def test_upsert_creates_customized_entry(self):
        entry = ScheduleService.upsert_entry(
            ResourceKind.SUBSIDIARY, self.subsidiary.id, MONDAY, time(9, 0), time(18, 0)
        )

        self.assertEqual(entry.open_time, time(9, 0))
        self.assertEqual(entry.close_time, time(18, 0))
        self.assertTrue(entry.customized)
        self.assertFalse(entry.closed)
        self.assertEqual(SubsidiaryScheduleEntry.objects.filter(subsidiary=self.subsidiary).count(), 1)

    def test_existing_entry_without_replace_conflicts(self):
        ScheduleService.upsert_entry(ResourceKind.SUBSIDIARY, self.subsidiary.id, MONDAY, time(9, 0), time(18, 0))

        with self.assertRaises(ScheduleConflictException) as ctx:
            ScheduleService.upsert_entry(
                ResourceKind.SUBSIDIARY, self.subsidiary.id, MONDAY, time(10, 0), time(17, 0)
            )

        self.assertEqual(ctx.exception.conflicting_dates, [MONDAY])
        entry = ScheduleService.get_entry(ResourceKind.SUBSIDIARY, self.subsidiary.id, MONDAY)
        self.assertEqual(entry.open_time, time(9, 0))

    def test_replace_is_idempotent(self):
        for _ in range(2):
            ScheduleService.upsert_entry(
                ResourceKind.SUBSIDIARY,
                self.subsidiary.id,
                MONDAY,
                time(10, 0),
                time(16, 0),
                replace_existing=True,
            )

        entries = SubsidiaryScheduleEntry.objects.filter(subsidiary=self.subsidiary)
        self.assertEqual(entries.count(), 1)
        self.assertEqual(entries.get().close_time, time(16, 0))

    def test_replace_marks_materialized_entry_customized(self):
        SubsidiaryScheduleEntryFactory(subsidiary=self.subsidiary, date=MONDAY, customized=False)

        entry = ScheduleService.upsert_entry(
            ResourceKind.SUBSIDIARY, self.subsidiary.id, MONDAY, time(9, 0), time(12, 0), replace_existing=True
        )

        self.assertTrue(entry.customized)

    def test_empty_window_rejected(self):
        with self.assertRaises(InvalidWindowException):
            ScheduleService.upsert_entry(
                ResourceKind.SUBSIDIARY, self.subsidiary.id, MONDAY, time(18, 0), time(9, 0)
            )
        with self.assertRaises(InvalidWindowException):
            ScheduleService.upsert_entry(
                ResourceKind.SUBSIDIARY, self.subsidiary.id, MONDAY, time(9, 0), time(9, 0)
            )

    def test_closed_entry(self):
        entry = ScheduleService.upsert_entry(ResourceKind.SUBSIDIARY, self.subsidiary.id, MONDAY, closed=True)

        self.assertTrue(entry.closed)
        self.assertEqual(entry.open_time, time(0, 0))

    def test_unknown_resource(self):
        with self.assertRaises(ResourceNotFoundException):
            ScheduleService.upsert_entry(ResourceKind.SUBSIDIARY, uuid.uuid4(), MONDAY, time(9, 0), time(18, 0))

    def test_unknown_kind(self):
        with self.assertRaises(InvalidRequestException):
            ScheduleService.get_entry("office", self.subsidiary.id, MONDAY)

    def test_child_window_must_fit_subsidiary_hours(self):
        SubsidiaryScheduleEntryFactory(
            subsidiary=self.subsidiary, date=MONDAY, open_time=time(9, 0), close_time=time(17, 0)
        )

        with self.assertRaises(InvalidWindowException):
            ScheduleService.upsert_entry(
                ResourceKind.PROFESSIONAL, self.professional.id, MONDAY, time(8, 0), time(12, 0)
            )

        entry = ScheduleService.upsert_entry(
            ResourceKind.PROFESSIONAL, self.professional.id, MONDAY, time(9, 0), time(17, 0)
        )
        self.assertEqual(entry.professional_id, self.professional.id)

    def test_child_cannot_open_on_closed_subsidiary_day(self):
        SubsidiaryScheduleEntryFactory(subsidiary=self.subsidiary, date=MONDAY, closed=True)
        chair_room = ChairRoomFactory(subsidiary=self.subsidiary)

        with self.assertRaises(InvalidWindowException):
            ScheduleService.upsert_entry(
                ResourceKind.CHAIR_ROOM, chair_room.id, MONDAY, time(9, 0), time(12, 0)
            )

    def test_bulk_upsert_reports_partial_success(self):
        ScheduleService.upsert_entry(
            ResourceKind.PROFESSIONAL, self.professional.id, date(2025, 3, 12), time(9, 0), time(18, 0)
        )

        result = ScheduleService.upsert_entries(
            ResourceKind.PROFESSIONAL,
            self.professional.id,
            [date(2025, 3, 10), date(2025, 3, 12), date(2025, 3, 14)],
            open_time=time(9, 0),
            close_time=time(18, 0),
        )

        self.assertEqual(result.succeeded, [date(2025, 3, 10), date(2025, 3, 14)])
        self.assertEqual(list(result.failed), [date(2025, 3, 12)])
        self.assertEqual(ProfessionalScheduleEntry.objects.filter(professional=self.professional).count(), 3)

    def test_delete_entry(self):
        ScheduleService.upsert_entry(ResourceKind.SUBSIDIARY, self.subsidiary.id, MONDAY, time(9, 0), time(18, 0))

        ScheduleService.delete_entry(ResourceKind.SUBSIDIARY, self.subsidiary.id, MONDAY)

        self.assertIsNone(ScheduleService.get_entry(ResourceKind.SUBSIDIARY, self.subsidiary.id, MONDAY))
        with self.assertRaises(ResourceNotFoundException):
            ScheduleService.delete_entry(ResourceKind.SUBSIDIARY, self.subsidiary.id, MONDAY)


class ConflictServiceTest(TestCase):
    """Test cases for the dry-run conflict checker"""

    def setUp(self):
        self.professional = ProfessionalFactory()
        ProfessionalScheduleEntryFactory(professional=self.professional, date=date(2025, 3, 3), customized=True)
        ProfessionalScheduleEntryFactory(professional=self.professional, date=date(2025, 3, 5), customized=False)

    def test_only_customized_entries_conflict_by_default(self):
        report = ConflictService.check_conflicts(
            ResourceKind.PROFESSIONAL,
            self.professional.id,
            weekdays={1, 3},
            start_date=date(2025, 3, 3),
            end_date=date(2025, 3, 17),
        )

        self.assertTrue(report.has_conflicts)
        self.assertEqual(report.conflicting_dates, [date(2025, 3, 3)])

    def test_all_entries_conflict_when_requested(self):
        report = ConflictService.check_conflicts(
            ResourceKind.PROFESSIONAL,
            self.professional.id,
            weekdays={1, 3},
            start_date=date(2025, 3, 3),
            end_date=date(2025, 3, 17),
            include_customized_only=False,
        )

        self.assertEqual(report.conflicting_dates, [date(2025, 3, 3), date(2025, 3, 5)])

    def test_explicit_dates_and_pattern_are_merged(self):
        report = ConflictService.check_conflicts(
            ResourceKind.PROFESSIONAL,
            self.professional.id,
            dates=[date(2025, 3, 5)],
            weekdays={1},
            start_date=date(2025, 3, 3),
            end_date=date(2025, 3, 3),
            include_customized_only=False,
        )

        self.assertEqual(report.conflicting_dates, [date(2025, 3, 3), date(2025, 3, 5)])

    def test_pattern_without_range_rejected(self):
        with self.assertRaises(InvalidRequestException):
            ConflictService.check_conflicts(ResourceKind.PROFESSIONAL, self.professional.id, weekdays={1})

    def test_no_candidates_means_no_conflicts(self):
        report = ConflictService.check_conflicts(ResourceKind.PROFESSIONAL, self.professional.id)

        self.assertFalse(report.has_conflicts)


class RecurringScheduleServiceTest(TestCase):
    """Test cases for recurring schedule use cases"""

    def setUp(self):
        self.subsidiary = SubsidiaryFactory()

    def _week(self):
        return {
            1: DaySchedule(open=True, open_time=time(9, 0), close_time=time(18, 0)),
            3: DaySchedule(open=True, open_time=time(13, 0), close_time=time(20, 0)),
            7: DaySchedule(open=False),
        }

    def test_week_schedule_materializes_open_days(self):
        result = RecurringScheduleService.apply_week_schedule(
            ResourceKind.SUBSIDIARY, self.subsidiary.id, self._week(), date(2025, 3, 3), date(2025, 3, 17)
        )

        self.assertEqual(
            result.succeeded,
            [date(2025, 3, 3), date(2025, 3, 5), date(2025, 3, 10), date(2025, 3, 12), date(2025, 3, 17)],
        )
        wednesday = ScheduleService.get_entry(ResourceKind.SUBSIDIARY, self.subsidiary.id, date(2025, 3, 12))
        self.assertEqual((wednesday.open_time, wednesday.close_time), (time(13, 0), time(20, 0)))
        self.assertIsNone(ScheduleService.get_entry(ResourceKind.SUBSIDIARY, self.subsidiary.id, date(2025, 3, 9)))

    def test_week_schedule_blocked_by_customized_entry(self):
        ScheduleService.upsert_entry(
            ResourceKind.SUBSIDIARY, self.subsidiary.id, date(2025, 3, 10), time(10, 0), time(12, 0)
        )

        with self.assertRaises(ScheduleConflictException) as ctx:
            RecurringScheduleService.apply_week_schedule(
                ResourceKind.SUBSIDIARY, self.subsidiary.id, self._week(), date(2025, 3, 3), date(2025, 3, 17)
            )

        self.assertEqual(ctx.exception.conflicting_dates, [date(2025, 3, 10)])
        self.assertEqual(SubsidiaryScheduleEntry.objects.filter(subsidiary=self.subsidiary).count(), 1)

    def test_week_schedule_replace_overwrites(self):
        ScheduleService.upsert_entry(
            ResourceKind.SUBSIDIARY, self.subsidiary.id, date(2025, 3, 10), time(10, 0), time(12, 0)
        )

        result = RecurringScheduleService.apply_week_schedule(
            ResourceKind.SUBSIDIARY,
            self.subsidiary.id,
            self._week(),
            date(2025, 3, 3),
            date(2025, 3, 17),
            replace_existing=True,
        )

        self.assertIn(date(2025, 3, 10), result.succeeded)
        entry = ScheduleService.get_entry(ResourceKind.SUBSIDIARY, self.subsidiary.id, date(2025, 3, 10))
        self.assertEqual(entry.close_time, time(18, 0))

    def test_week_schedule_needs_an_open_day(self):
        with self.assertRaises(InvalidRequestException):
            RecurringScheduleService.apply_week_schedule(
                ResourceKind.SUBSIDIARY,
                self.subsidiary.id,
                {1: DaySchedule(open=False)},
                date(2025, 3, 3),
                date(2025, 3, 17),
            )

    def test_week_schedule_rejects_bad_keys_and_range(self):
        with self.assertRaises(InvalidRequestException):
            RecurringScheduleService.apply_week_schedule(
                ResourceKind.SUBSIDIARY,
                self.subsidiary.id,
                {0: DaySchedule(open=True, open_time=time(9, 0), close_time=time(10, 0))},
                date(2025, 3, 3),
                date(2025, 3, 17),
            )
        with self.assertRaises(InvalidRequestException):
            RecurringScheduleService.apply_week_schedule(
                ResourceKind.SUBSIDIARY, self.subsidiary.id, self._week(), date(2025, 3, 17), date(2025, 3, 3)
            )

    def test_recurring_schedule_with_exclusions(self):
        result = RecurringScheduleService.create_recurring_schedule(
            ResourceKind.SUBSIDIARY,
            self.subsidiary.id,
            {1},
            date(2025, 3, 3),
            date(2025, 3, 17),
            time(9, 0),
            time(18, 0),
            exclude_dates=[date(2025, 3, 10)],
        )

        self.assertEqual(result.succeeded, [date(2025, 3, 3), date(2025, 3, 17)])

    def test_closed_days(self):
        result = RecurringScheduleService.create_closed_days(
            ResourceKind.SUBSIDIARY, self.subsidiary.id, [date(2025, 12, 25), date(2026, 1, 1)]
        )

        self.assertEqual(result.succeeded_count, 2)
        entry = ScheduleService.get_entry(ResourceKind.SUBSIDIARY, self.subsidiary.id, date(2025, 12, 25))
        self.assertTrue(entry.closed)
