import logging

from django.http import FileResponse
from rest_framework import status
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions_api import HasRole
from accounts.principal import Principal, ADMIN, FACULTY
from portal.exceptions import NotFound

from .models import Notice, Resource
from .serializers import (
    NoticeSerializer,
    ResourceSerializer,
    StudentNoticeSerializer,
    StudentResourceSerializer,
)
from .services import content_access

logger = logging.getLogger(__name__)

STAFF_WRITES = {'POST': (ADMIN, FACULTY), 'PATCH': (ADMIN, FACULTY), 'DELETE': (ADMIN, FACULTY)}


def _filter_by_params(request, items, fields):
    for name in fields:
        value = request.query_params.get(name)
        if value:
            items = [item for item in items if str(getattr(item, name)) == value]
    return items


class NoticeListCreateView(APIView):
    permission_classes = (HasRole,)
    required_roles = STAFF_WRITES

    def get(self, request):
        principal = Principal.from_request(request)
        items = list(content_access.readable(principal, Notice))
        items = _filter_by_params(request, items, ('category', 'priority'))
        serializer_class = StudentNoticeSerializer if principal.is_student else NoticeSerializer
        return Response(serializer_class(items, many=True).data)

    def post(self, request):
        principal = Principal.from_request(request)
        ser = NoticeSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        notice = ser.save(owner=content_access.owner_for(principal), created_by=request.user)
        logger.info('Notice %s created by user %s', notice.pk, principal.id)
        content_access.announce_notice(notice)
        return Response(NoticeSerializer(notice).data, status=status.HTTP_201_CREATED)


class NoticeDetailView(APIView):
    permission_classes = (HasRole,)
    required_roles = STAFF_WRITES

    def get(self, request, notice_id: int):
        principal = Principal.from_request(request)
        notice = content_access.get_readable(principal, Notice, notice_id)
        if principal.is_student:
            content_access.record_notice_view(notice, request.user)
            return Response(StudentNoticeSerializer(notice).data)
        return Response(NoticeSerializer(notice).data)

    def patch(self, request, notice_id: int):
        principal = Principal.from_request(request)
        notice = content_access.get_writable(principal, Notice, notice_id)
        was_live = not notice.is_draft
        ser = NoticeSerializer(notice, data=request.data, partial=True)
        ser.is_valid(raise_exception=True)
        notice = ser.save()
        if not was_live:
            content_access.announce_notice(notice)
        return Response(NoticeSerializer(notice).data)

    def delete(self, request, notice_id: int):
        principal = Principal.from_request(request)
        notice = content_access.get_writable(principal, Notice, notice_id)
        notice.delete()
        logger.info('Notice %s deleted by user %s', notice_id, principal.id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class ResourceListCreateView(APIView):
    permission_classes = (HasRole,)
    required_roles = STAFF_WRITES
    parser_classes = (MultiPartParser, FormParser, JSONParser)

    def get(self, request):
        principal = Principal.from_request(request)
        items = list(content_access.readable(principal, Resource))
        items = _filter_by_params(request, items, ('subject', 'subject_code', 'resource_type', 'semester'))
        serializer_class = StudentResourceSerializer if principal.is_student else ResourceSerializer
        return Response(serializer_class(items, many=True).data)

    def post(self, request):
        principal = Principal.from_request(request)
        ser = ResourceSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        resource = ser.save(
            owner=content_access.owner_for(principal),
            created_by=request.user,
            **content_access.describe_upload(ser.validated_data['file']),
        )
        logger.info('Resource %s uploaded by user %s (%s bytes)', resource.pk, principal.id, resource.file_size)
        return Response(ResourceSerializer(resource).data, status=status.HTTP_201_CREATED)


class ResourceDetailView(APIView):
    permission_classes = (HasRole,)
    required_roles = STAFF_WRITES

    def get(self, request, resource_id: int):
        principal = Principal.from_request(request)
        resource = content_access.get_readable(principal, Resource, resource_id)
        serializer_class = StudentResourceSerializer if principal.is_student else ResourceSerializer
        return Response(serializer_class(resource).data)

    def delete(self, request, resource_id: int):
        principal = Principal.from_request(request)
        resource = content_access.get_writable(principal, Resource, resource_id)
        resource.is_active = False
        resource.save(update_fields=['is_active', 'updated_at'])
        logger.info('Resource %s deactivated by user %s', resource_id, principal.id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class ResourceDownloadView(APIView):
    def get(self, request, resource_id: int):
        principal = Principal.from_request(request)
        resource = content_access.get_readable(principal, Resource, resource_id)
        try:
            handle = resource.file.open('rb')
        except (FileNotFoundError, ValueError):
            logger.warning('Resource %s has no stored file', resource_id)
            raise NotFound()
        content_access.record_download(resource)
        return FileResponse(
            handle,
            as_attachment=True,
            filename=resource.original_name or None,
            content_type=resource.mime_type or None,
        )
