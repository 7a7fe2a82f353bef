import logging

from django.db.models import Q
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions_api import HasRole, IsAdminRole, IsFacultyOrAdmin
from accounts.principal import Principal, FACULTY, STUDENT, ADMIN
from accounts.services import registrations
from portal.exceptions import NotFound, ValidationError
from portal.params import int_param

from .models import AttendanceRecord, FacultyProfile, FacultyStudentAssignment, MarksRecord, StudentProfile
from .serializers import (
    AssignmentReadSerializer,
    AssignmentSerializer,
    AttendanceBulkSerializer,
    AttendanceEntrySerializer,
    AttendanceRecordSerializer,
    AttendanceUpdateSerializer,
    FacultyAccountSerializer,
    FacultyProfileSerializer,
    MarksBulkSerializer,
    MarksEntrySerializer,
    MarksPublishSerializer,
    MarksRecordSerializer,
    StudentProfileAdminSerializer,
    StudentProfileSerializer,
)
from .services import (
    academic_records,
    assignment_registry,
    attendance_service,
    marks_service,
    profiles,
)
from .services.scope_resolver import ResourceKind, resolve_scope

logger = logging.getLogger(__name__)


def _bulk_entries(request, bulk_serializer_class, entry_serializer_class):
    """Accept ``{"records": [...]}`` or a single entry object."""
    data = request.data
    if isinstance(data, dict) and 'records' in data:
        ser = bulk_serializer_class(data=data)
        ser.is_valid(raise_exception=True)
        return ser.validated_data['records'], ser.validated_data
    ser = entry_serializer_class(data=data)
    ser.is_valid(raise_exception=True)
    return [ser.validated_data], {}


def scoped_attendance(principal):
    scope = resolve_scope(principal, ResourceKind.ATTENDANCE)
    qs = AttendanceRecord.objects.filter(is_deleted=False).select_related('student')
    return scope.apply(qs, author_field='faculty')


def scoped_marks(principal):
    scope = resolve_scope(principal, ResourceKind.MARKS)
    qs = MarksRecord.objects.filter(is_deleted=False).select_related('student')
    if principal.is_student:
        # unpublished marks are never shown to their student
        qs = qs.filter(is_published=True)
    return scope.apply(qs, author_field='faculty')


def _filter_records(request, qs):
    student = int_param(request, 'student')
    if student is not None:
        qs = qs.filter(student_id=student)
    semester = int_param(request, 'semester')
    if semester is not None:
        qs = qs.filter(semester=semester)
    for name in ('subject', 'subject_code', 'academic_year'):
        value = request.query_params.get(name)
        if value:
            qs = qs.filter(**{name: value})
    return qs


class ProfileView(APIView):
    """The caller's own profile, created with placeholders on first access."""
    permission_classes = (HasRole,)
    required_roles = {'GET': (STUDENT, FACULTY), 'PATCH': (FACULTY,)}

    def get(self, request):
        principal = Principal.from_request(request)
        profile = profiles.profile_for(principal)
        return Response(self._serialize(principal, profile))

    def patch(self, request):
        principal = Principal.from_request(request)
        profile = profiles.profile_for(principal)
        ser = FacultyProfileSerializer(profile, data=request.data, partial=True)
        ser.is_valid(raise_exception=True)
        ser.save()
        logger.info('Profile %s updated by user %s: %s', profile.pk, principal.id, sorted(ser.validated_data))
        return Response(ser.data)

    def _serialize(self, principal, profile):
        if principal.is_student:
            return StudentProfileSerializer(profile).data
        return FacultyProfileSerializer(profile).data


class StudentListView(APIView):
    permission_classes = (IsFacultyOrAdmin,)

    def get(self, request):
        principal = Principal.from_request(request)
        scope = resolve_scope(principal, ResourceKind.ROSTER)
        qs = scope.apply(StudentProfile.objects.select_related('user'), student_field='pk')

        semester = int_param(request, 'semester')
        if semester is not None:
            qs = qs.filter(semester=semester)
        for name in ('course', 'department'):
            value = request.query_params.get(name)
            if value:
                qs = qs.filter(**{f'{name}__iexact': value})
        search = request.query_params.get('q')
        if search:
            qs = qs.filter(
                Q(roll_number__icontains=search)
                | Q(user__username__icontains=search)
                | Q(user__first_name__icontains=search)
                | Q(user__last_name__icontains=search)
            )
        return Response(StudentProfileSerializer(qs, many=True).data)


class StudentDetailView(APIView):
    permission_classes = (HasRole,)
    required_roles = {'PATCH': (ADMIN,)}

    def get(self, request, student_id: int):
        principal = Principal.from_request(request)
        resolve_scope(principal, ResourceKind.PROFILE, target_id=student_id)
        profile = StudentProfile.objects.select_related('user').filter(pk=student_id).first()
        if profile is None:
            raise NotFound()
        return Response(StudentProfileSerializer(profile).data)

    def patch(self, request, student_id: int):
        profile = StudentProfile.objects.select_related('user').filter(pk=student_id).first()
        if profile is None:
            raise NotFound()
        ser = StudentProfileAdminSerializer(profile, data=request.data, partial=True)
        ser.is_valid(raise_exception=True)
        ser.save()
        logger.info('Student profile %s updated by admin %s: %s', profile.pk, request.user.pk, sorted(ser.validated_data))
        return Response(ser.data)


class FacultyListCreateView(APIView):
    """Faculty accounts are created by admins; self-registration is student only."""
    permission_classes = (IsAdminRole,)

    def get(self, request):
        qs = FacultyProfile.objects.select_related('user').order_by('employee_code')
        department = request.query_params.get('department')
        if department:
            qs = qs.filter(department__iexact=department)
        return Response(FacultyProfileSerializer(qs, many=True).data)

    def post(self, request):
        ser = FacultyAccountSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        profile = profiles.create_faculty_account(created_by=request.user.pk, **ser.validated_data)
        return Response(FacultyProfileSerializer(profile).data, status=status.HTTP_201_CREATED)


class AssignmentView(APIView):
    permission_classes = (IsAdminRole,)

    def get(self, request):
        qs = FacultyStudentAssignment.objects.all().order_by('faculty_id', 'student_id')
        faculty = int_param(request, 'faculty')
        if faculty is not None:
            qs = qs.filter(faculty_id=faculty)
        student = int_param(request, 'student')
        if student is not None:
            qs = qs.filter(student_id=student)
        return Response(AssignmentReadSerializer(qs, many=True).data)

    def post(self, request):
        ser = AssignmentSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        assignment, created = assignment_registry.assign(
            ser.validated_data['faculty_id'],
            ser.validated_data['student_id'],
            assigned_by=request.user,
        )
        return Response(
            AssignmentReadSerializer(assignment).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )

    def delete(self, request):
        ser = AssignmentSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        removed = assignment_registry.unassign(ser.validated_data['faculty_id'], ser.validated_data['student_id'])
        return Response({'removed': removed})


class AttendanceListCreateView(APIView):
    permission_classes = (HasRole,)
    required_roles = {'POST': (ADMIN, FACULTY)}

    def get(self, request):
        principal = Principal.from_request(request)
        qs = _filter_records(request, scoped_attendance(principal))
        status_param = request.query_params.get('status')
        if status_param:
            qs = qs.filter(status=status_param)
        date_from = request.query_params.get('date_from')
        if date_from:
            qs = qs.filter(date__gte=date_from)
        date_to = request.query_params.get('date_to')
        if date_to:
            qs = qs.filter(date__lte=date_to)
        return Response(AttendanceRecordSerializer(qs, many=True).data)

    def post(self, request):
        principal = Principal.from_request(request)
        entries, _ = _bulk_entries(request, AttendanceBulkSerializer, AttendanceEntrySerializer)
        records = attendance_service.mark_attendance(principal, entries)
        return Response(AttendanceRecordSerializer(records, many=True).data, status=status.HTTP_201_CREATED)


class AttendanceDetailView(APIView):
    permission_classes = (HasRole,)
    required_roles = {'PATCH': (ADMIN, FACULTY), 'DELETE': (ADMIN, FACULTY)}

    def get(self, request, record_id: int):
        principal = Principal.from_request(request)
        record = scoped_attendance(principal).filter(pk=record_id).first()
        if record is None:
            raise NotFound()
        return Response(AttendanceRecordSerializer(record).data)

    def patch(self, request, record_id: int):
        principal = Principal.from_request(request)
        ser = AttendanceUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        record = attendance_service.update_attendance(principal, record_id, ser.validated_data)
        return Response(AttendanceRecordSerializer(record).data)

    def delete(self, request, record_id: int):
        principal = Principal.from_request(request)
        attendance_service.delete_attendance(principal, record_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class AttendanceSummaryView(APIView):
    def get(self, request):
        principal = Principal.from_request(request)
        qs = _filter_records(request, scoped_attendance(principal))
        return Response(academic_records.attendance_summary(qs))


class MarksListCreateView(APIView):
    permission_classes = (HasRole,)
    required_roles = {'POST': (ADMIN, FACULTY)}

    def get(self, request):
        principal = Principal.from_request(request)
        qs = _filter_records(request, scoped_marks(principal))
        exam_type = request.query_params.get('exam_type')
        if exam_type:
            qs = qs.filter(exam_type=exam_type)
        return Response(MarksRecordSerializer(qs, many=True).data)

    def post(self, request):
        principal = Principal.from_request(request)
        entries, extra = _bulk_entries(request, MarksBulkSerializer, MarksEntrySerializer)
        records = marks_service.upsert_marks(principal, entries, publish=extra.get('publish', False))
        return Response(MarksRecordSerializer(records, many=True).data, status=status.HTTP_201_CREATED)


class MarksDetailView(APIView):
    permission_classes = (HasRole,)
    required_roles = {'DELETE': (ADMIN, FACULTY)}

    def get(self, request, record_id: int):
        principal = Principal.from_request(request)
        record = scoped_marks(principal).filter(pk=record_id).first()
        if record is None:
            raise NotFound()
        return Response(MarksRecordSerializer(record).data)

    def delete(self, request, record_id: int):
        principal = Principal.from_request(request)
        marks_service.delete_marks(principal, record_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class MarksPublishView(APIView):
    permission_classes = (IsFacultyOrAdmin,)

    def post(self, request):
        principal = Principal.from_request(request)
        ser = MarksPublishSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        count = marks_service.set_published(
            principal, ser.validated_data['record_ids'], publish=ser.validated_data['publish']
        )
        return Response({'updated': count, 'is_published': ser.validated_data['publish']})


class GpaView(APIView):
    """Term and cumulative GPA from published marks.

    Students get their own; faculty and admins pass ``?student=<id>``.
    """

    def get(self, request):
        principal = Principal.from_request(request)
        student_id = int_param(request, 'student')
        if student_id is None:
            if not principal.is_student:
                raise ValidationError('student', 'This query parameter is required.')
            student_id = profiles.get_or_create_student_profile(principal.id).pk
        resolve_scope(principal, ResourceKind.MARKS, target_id=student_id)
        if not StudentProfile.objects.filter(pk=student_id).exists():
            raise NotFound()

        payload = {
            'student': student_id,
            'cumulative_gpa': academic_records.cumulative_gpa(student_id),
            'terms': academic_records.term_breakdown(student_id),
        }
        semester = int_param(request, 'semester')
        academic_year = request.query_params.get('academic_year')
        if semester is not None and academic_year:
            payload['term_gpa'] = academic_records.term_gpa(student_id, semester, academic_year)
        return Response(payload)


class DashboardView(APIView):
    permission_classes = (HasRole,)
    required_roles = {'GET': (ADMIN, STUDENT, FACULTY)}

    def get(self, request):
        from leaves.models import LeaveApplication

        principal = Principal.from_request(request)
        if principal.is_admin:
            return Response({
                'role': ADMIN,
                'students': StudentProfile.objects.filter(is_active=True).count(),
                'faculty': FacultyProfile.objects.filter(is_active=True).count(),
                'unassigned_students': StudentProfile.objects.filter(
                    is_active=True, faculty_assignments__isnull=True
                ).count(),
                'pending_registrations': registrations.self_registrations().count(),
                'pending_leaves': LeaveApplication.objects.filter(status=LeaveApplication.Status.PENDING).count(),
                'unpublished_marks': MarksRecord.objects.filter(is_deleted=False, is_published=False).count(),
            })

        if principal.is_student:
            profile = profiles.get_or_create_student_profile(principal.id)
            return Response({
                'role': STUDENT,
                'profile': profile.pk,
                'attendance_percentage': academic_records.attendance_percentage(profile.pk),
                'cumulative_gpa': profile.cumulative_gpa,
                'total_credits': profile.total_credits,
                'published_marks': scoped_marks(principal).count(),
                'pending_leaves': LeaveApplication.objects.filter(
                    student=profile, status=LeaveApplication.Status.PENDING
                ).count(),
            })

        faculty = profiles.get_or_create_faculty_profile(principal.id)
        student_ids = assignment_registry.assigned_student_ids(faculty.pk)
        return Response({
            'role': FACULTY,
            'profile': faculty.pk,
            'assigned_students': len(student_ids),
            'attendance_marked': AttendanceRecord.objects.filter(faculty=faculty, is_deleted=False).count(),
            'marks_entered': MarksRecord.objects.filter(faculty=faculty, is_deleted=False).count(),
            'unpublished_marks': MarksRecord.objects.filter(
                faculty=faculty, is_deleted=False, is_published=False
            ).count(),
            'pending_leave_reviews': LeaveApplication.objects.filter(
                student_id__in=student_ids, status=LeaveApplication.Status.PENDING
            ).count(),
        })
