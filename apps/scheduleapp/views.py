"""
Schedule app views
Handles endpoints for resource calendars and professional/chair-room assignments
"""

from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.scheduleapp.serializers import (
    AssignmentQuerySerializer,
    AssignmentSerializer,
    ClosedDaysSerializer,
    ConflictCheckSerializer,
    EntryRangeQuerySerializer,
    RecurringAssignmentKeySerializer,
    RecurringAssignmentSerializer,
    ScheduleEntrySerializer,
    ScheduleEntryUpsertSerializer,
    SingleAssignmentKeySerializer,
    SingleAssignmentSerializer,
    WeekScheduleSerializer,
)
from apps.scheduleapp.services.assignment_service import AssignmentService
from apps.scheduleapp.services.conflict_service import ConflictService
from apps.scheduleapp.services.recurring_schedule_service import RecurringScheduleService
from apps.scheduleapp.services.schedule_service import ScheduleService
from core.exceptions import ResourceNotFoundException


class ScheduleEntryListView(APIView):
    """Entries of a resource between two dates"""

    permission_classes = [permissions.AllowAny]

    def get(self, request, kind, resource_id):
        serializer = EntryRangeQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)

        entries = ScheduleService.get_entries(
            kind,
            resource_id,
            serializer.validated_data["start_date"],
            serializer.validated_data["end_date"],
        )
        return Response(ScheduleEntrySerializer(entries, many=True).data)


class ScheduleEntryDetailView(APIView):
    """Read, write or delete the entry of a resource for one date"""

    permission_classes = [permissions.AllowAny]

    def get(self, request, kind, resource_id, day):
        entry = ScheduleService.get_entry(kind, resource_id, day)
        if entry is None:
            raise ResourceNotFoundException(f"No schedule on {day}")
        return Response(ScheduleEntrySerializer(entry).data)

    def put(self, request, kind, resource_id, day):
        serializer = ScheduleEntryUpsertSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        entry = ScheduleService.upsert_entry(
            kind,
            resource_id,
            day,
            open_time=data.get("open_time"),
            close_time=data.get("close_time"),
            closed=data["closed"],
            replace_existing=data["replace_existing"],
        )
        return Response(ScheduleEntrySerializer(entry).data)

    def delete(self, request, kind, resource_id, day):
        ScheduleService.delete_entry(kind, resource_id, day)
        return Response(status=status.HTTP_204_NO_CONTENT)


class RecurringScheduleView(APIView):
    """Apply a weekday schedule over a date range"""

    permission_classes = [permissions.AllowAny]

    def post(self, request, kind, resource_id):
        serializer = WeekScheduleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = RecurringScheduleService.apply_week_schedule(
            kind,
            resource_id,
            data["week_schedule"],
            data["start_date"],
            data["end_date"],
            replace_existing=data["replace_existing"],
            check_conflicts=data["check_conflicts"],
            exclude_dates=data["exclude_dates"],
        )
        return Response(result.to_dict(), status=status.HTTP_201_CREATED)


class ClosedDaysView(APIView):
    permission_classes = [permissions.AllowAny]

    def post(self, request, kind, resource_id):
        serializer = ClosedDaysSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = RecurringScheduleService.create_closed_days(
            kind,
            resource_id,
            serializer.validated_data["dates"],
            replace_existing=serializer.validated_data["replace_existing"],
        )
        return Response(result.to_dict(), status=status.HTTP_201_CREATED)


class ConflictCheckView(APIView):
    """Dry run: which dates already hold entries for the resource"""

    permission_classes = [permissions.AllowAny]

    def post(self, request, kind, resource_id):
        serializer = ConflictCheckSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        report = ConflictService.check_conflicts(
            kind,
            resource_id,
            dates=data["dates"],
            weekdays=data["weekdays"],
            start_date=data.get("start_date"),
            end_date=data.get("end_date"),
            include_customized_only=data["include_customized_only"],
        )
        return Response(report.to_dict())


class AssignmentListView(APIView):
    """Effective assignments of a professional or a chair/room on a date"""

    permission_classes = [permissions.AllowAny]

    def get(self, request):
        serializer = AssignmentQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        if data.get("professional"):
            assignments = AssignmentService.assignments_for_professional(data["professional"], data["date"])
        else:
            assignments = AssignmentService.assignments_for_chair_room(data["chair_room"], data["date"])
        return Response(AssignmentSerializer(assignments, many=True).data)


class SingleAssignmentView(APIView):
    permission_classes = [permissions.AllowAny]

    def put(self, request):
        serializer = SingleAssignmentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        assignment = AssignmentService.upsert_single(
            data["professional"], data["chair_room"], data["date"], data["start_time"], data["end_time"]
        )
        return Response(AssignmentSerializer(assignment).data)

    def delete(self, request):
        serializer = SingleAssignmentKeySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        AssignmentService.delete_single(data["professional"], data["chair_room"], data["date"])
        return Response(status=status.HTTP_204_NO_CONTENT)


class RecurringAssignmentView(APIView):
    permission_classes = [permissions.AllowAny]

    def put(self, request):
        serializer = RecurringAssignmentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        assignments = AssignmentService.upsert_recurring_many(
            data["professional"], data["chair_room"], data["weekdays"], data["start_time"], data["end_time"]
        )
        return Response(AssignmentSerializer(assignments, many=True).data)

    def delete(self, request):
        serializer = RecurringAssignmentKeySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        AssignmentService.delete_recurring(data["professional"], data["chair_room"], data["weekday"])
        return Response(status=status.HTTP_204_NO_CONTENT)
