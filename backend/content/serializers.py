from rest_framework import serializers

from academics.models import MIN_SEMESTER, MAX_SEMESTER
from .models import Notice, Resource

TARGET_FIELDS = ('all_students', 'target_courses', 'target_semesters', 'target_departments', 'target_student_ids')


class TargetGroupMixin(serializers.Serializer):
    target_courses = serializers.ListField(child=serializers.CharField(max_length=128), required=False)
    target_semesters = serializers.ListField(
        child=serializers.IntegerField(min_value=MIN_SEMESTER, max_value=MAX_SEMESTER), required=False
    )
    target_departments = serializers.ListField(child=serializers.CharField(max_length=128), required=False)
    target_student_ids = serializers.ListField(child=serializers.IntegerField(min_value=1), required=False)

    def validate(self, attrs):
        attrs = super().validate(attrs)
        if attrs.get('expiry_date') and attrs.get('publish_date') and attrs['expiry_date'] <= attrs['publish_date']:
            raise serializers.ValidationError({'expiry_date': ['Expiry date must be after the publish date.']})
        return attrs


class OwnerMixin(serializers.Serializer):
    owner_name = serializers.SerializerMethodField()

    def get_owner_name(self, obj):
        if obj.owner is None:
            return None
        user = obj.owner.user
        return user.get_full_name() or user.username


class NoticeSerializer(OwnerMixin, TargetGroupMixin, serializers.ModelSerializer):
    class Meta:
        model = Notice
        fields = (
            'id', 'owner', 'owner_name', 'title', 'content', 'priority', 'category',
            'is_active', 'is_draft', 'is_important', 'publish_date', 'expiry_date', 'view_count',
            'created_at', 'updated_at',
        ) + TARGET_FIELDS
        read_only_fields = ('owner', 'view_count', 'created_at', 'updated_at')


class StudentNoticeSerializer(OwnerMixin, serializers.ModelSerializer):
    """Notice as shown to a student; targeting details stay private."""

    class Meta:
        model = Notice
        fields = ('id', 'owner_name', 'title', 'content', 'priority', 'category', 'is_important',
                  'publish_date', 'expiry_date')
        read_only_fields = fields


class ResourceSerializer(OwnerMixin, TargetGroupMixin, serializers.ModelSerializer):
    class Meta:
        model = Resource
        fields = (
            'id', 'owner', 'owner_name', 'title', 'description', 'subject', 'subject_code', 'resource_type',
            'file', 'original_name', 'file_size', 'mime_type', 'is_active', 'is_public', 'semester',
            'academic_year', 'expiry_date', 'download_count', 'uploaded_at',
        ) + TARGET_FIELDS
        read_only_fields = ('owner', 'original_name', 'file_size', 'mime_type', 'download_count', 'uploaded_at')
        extra_kwargs = {
            'file': {'write_only': True},
            # multipart forms leave unchecked booleans out entirely
            'is_active': {'default': True},
            'is_public': {'default': False},
        }


class StudentResourceSerializer(OwnerMixin, serializers.ModelSerializer):
    class Meta:
        model = Resource
        fields = ('id', 'owner_name', 'title', 'description', 'subject', 'subject_code', 'resource_type',
                  'original_name', 'file_size', 'mime_type', 'semester', 'academic_year', 'uploaded_at')
        read_only_fields = fields
