from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from academics.services import profiles
from academics.services.scope_resolver import ResourceKind, resolve_scope
from accounts.permissions_api import HasRole
from accounts.principal import Principal, STUDENT
from portal.exceptions import NotFound, ValidationError
from portal.params import int_param

from .serializers import LeaveApplicationSerializer, LeaveReviewSerializer, LeaveSubmitSerializer
from .services import leave_workflow


class LeaveListCreateView(APIView):
    permission_classes = (HasRole,)
    required_roles = {'POST': (STUDENT,)}

    def get(self, request):
        principal = Principal.from_request(request)
        qs = leave_workflow.scoped_leaves(principal)
        status_param = request.query_params.get('status')
        if status_param:
            qs = qs.filter(status=status_param)
        leave_type = request.query_params.get('leave_type')
        if leave_type:
            qs = qs.filter(leave_type=leave_type)
        student = int_param(request, 'student')
        if student is not None:
            qs = qs.filter(student_id=student)
        return Response(LeaveApplicationSerializer(qs, many=True).data)

    def post(self, request):
        principal = Principal.from_request(request)
        ser = LeaveSubmitSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        application = leave_workflow.submit_leave(principal, **ser.validated_data)
        return Response(LeaveApplicationSerializer(application).data, status=status.HTTP_201_CREATED)


class LeaveDetailView(APIView):
    def get(self, request, leave_id: int):
        principal = Principal.from_request(request)
        application = leave_workflow.scoped_leaves(principal).filter(pk=leave_id).first()
        if application is None:
            raise NotFound()
        return Response(LeaveApplicationSerializer(application).data)


class _LeaveReviewView(APIView):
    # who may review is decided by leave_workflow, after the row is locked
    transition = None

    def post(self, request, leave_id: int):
        principal = Principal.from_request(request)
        ser = LeaveReviewSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        application = self.transition(leave_id, principal, ser.validated_data['comments'])
        return Response(LeaveApplicationSerializer(application).data)


class LeaveApproveView(_LeaveReviewView):
    transition = staticmethod(leave_workflow.approve_leave)


class LeaveRejectView(_LeaveReviewView):
    transition = staticmethod(leave_workflow.reject_leave)


class LeaveCancelView(APIView):
    def post(self, request, leave_id: int):
        principal = Principal.from_request(request)
        application = leave_workflow.cancel_leave(leave_id, principal)
        return Response(LeaveApplicationSerializer(application).data)


class LeaveStatsView(APIView):
    """Approved leave per type for one academic year (July to June).

    Students get their own; faculty and admins pass ``?student=<id>``.
    """

    def get(self, request):
        principal = Principal.from_request(request)
        student_id = int_param(request, 'student')
        if student_id is None:
            if not principal.is_student:
                raise ValidationError('student', 'This query parameter is required.')
            student_id = profiles.get_or_create_student_profile(principal.id).pk
        resolve_scope(principal, ResourceKind.LEAVE, target_id=student_id)

        academic_year = request.query_params.get('academic_year') or leave_workflow.current_academic_year()
        return Response(leave_workflow.leave_stats(student_id, academic_year))
