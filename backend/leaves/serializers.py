from rest_framework import serializers

from .models import LeaveApplication


class LeaveApplicationSerializer(serializers.ModelSerializer):
    roll_number = serializers.CharField(source='student.roll_number', read_only=True)
    applicant_name = serializers.SerializerMethodField()
    reviewer_name = serializers.SerializerMethodField()

    class Meta:
        model = LeaveApplication
        fields = (
            'id', 'student', 'roll_number', 'applicant_name', 'leave_type', 'reason', 'from_date', 'to_date',
            'is_half_day', 'half_day_period', 'total_days', 'priority', 'status', 'reviewer_name',
            'review_comments', 'review_date', 'applied_at',
        )
        read_only_fields = fields

    def get_applicant_name(self, obj):
        return obj.applicant.get_full_name() or obj.applicant.username

    def get_reviewer_name(self, obj):
        if obj.reviewer is None:
            return None
        return obj.reviewer.get_full_name() or obj.reviewer.username


class LeaveSubmitSerializer(serializers.Serializer):
    leave_type = serializers.ChoiceField(choices=LeaveApplication.LeaveType.choices)
    reason = serializers.CharField(max_length=500)
    from_date = serializers.DateField()
    to_date = serializers.DateField()
    is_half_day = serializers.BooleanField(default=False)
    half_day_period = serializers.ChoiceField(
        choices=LeaveApplication.HalfDayPeriod.choices, required=False, allow_blank=True, default=''
    )
    priority = serializers.ChoiceField(choices=LeaveApplication.Priority.choices, default=LeaveApplication.Priority.MEDIUM)

    def validate(self, attrs):
        if attrs['from_date'] > attrs['to_date']:
            raise serializers.ValidationError({'from_date': ['From date cannot be after to date.']})
        if attrs.get('is_half_day') and not attrs.get('half_day_period'):
            raise serializers.ValidationError({'half_day_period': ['Required for a half-day leave.']})
        return attrs


class LeaveReviewSerializer(serializers.Serializer):
    comments = serializers.CharField(max_length=300, required=False, allow_blank=True, default='')
