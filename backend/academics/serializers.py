from django.contrib.auth import get_user_model
from rest_framework import serializers

from .models import (
    AttendanceRecord,
    FacultyProfile,
    FacultyStudentAssignment,
    MarksRecord,
    StudentProfile,
    MIN_SEMESTER,
    MAX_SEMESTER,
    NOT_ASSIGNED,
    academic_year_validator,
)


def _display_name(user):
    full = ' '.join(p for p in (user.first_name, user.last_name) if p).strip()
    return full or user.username


class StudentProfileSerializer(serializers.ModelSerializer):
    username = serializers.CharField(source='user.username', read_only=True)
    name = serializers.SerializerMethodField()
    email = serializers.EmailField(source='user.email', read_only=True)

    class Meta:
        model = StudentProfile
        fields = (
            'id', 'username', 'name', 'email', 'roll_number', 'course', 'semester', 'department',
            'enrollment_year', 'cumulative_gpa', 'total_credits', 'is_active',
        )
        # course, semester and department decide notice targeting; only admins change them
        read_only_fields = (
            'roll_number', 'course', 'semester', 'department', 'enrollment_year', 'cumulative_gpa',
            'total_credits', 'is_active',
        )

    def get_name(self, obj):
        return _display_name(obj.user)


class StudentProfileAdminSerializer(StudentProfileSerializer):
    class Meta(StudentProfileSerializer.Meta):
        read_only_fields = ('roll_number', 'enrollment_year', 'cumulative_gpa', 'total_credits')


class FacultyProfileSerializer(serializers.ModelSerializer):
    username = serializers.CharField(source='user.username', read_only=True)
    name = serializers.SerializerMethodField()
    email = serializers.EmailField(source='user.email', read_only=True)
    assigned_students = serializers.SerializerMethodField()

    class Meta:
        model = FacultyProfile
        fields = ('id', 'username', 'name', 'email', 'employee_code', 'department', 'designation',
                  'is_active', 'assigned_students')
        read_only_fields = ('employee_code', 'is_active')

    def get_name(self, obj):
        return _display_name(obj.user)

    def get_assigned_students(self, obj):
        return sorted(obj.assigned_student_ids)


class FacultyAccountSerializer(serializers.Serializer):
    username = serializers.CharField(max_length=150)
    password = serializers.CharField(write_only=True, min_length=6)
    email = serializers.EmailField(required=False, allow_blank=True, default='')
    first_name = serializers.CharField(max_length=150, required=False, allow_blank=True, default='')
    last_name = serializers.CharField(max_length=150, required=False, allow_blank=True, default='')
    employee_code = serializers.CharField(max_length=64, required=False, allow_blank=True, default='')
    department = serializers.CharField(max_length=128, required=False, default=NOT_ASSIGNED)
    designation = serializers.ChoiceField(
        choices=FacultyProfile.Designation.choices, required=False, default=FacultyProfile.Designation.LECTURER
    )

    def validate_username(self, value):
        if get_user_model().objects.filter(username__iexact=value).exists():
            raise serializers.ValidationError('A user with that username already exists.')
        return value

    def validate_employee_code(self, value):
        if value and FacultyProfile.objects.filter(employee_code__iexact=value).exists():
            raise serializers.ValidationError('This employee code is already in use.')
        return value


class AssignmentSerializer(serializers.Serializer):
    faculty = serializers.IntegerField(source='faculty_id', min_value=1)
    student = serializers.IntegerField(source='student_id', min_value=1)


class AssignmentReadSerializer(serializers.ModelSerializer):
    class Meta:
        model = FacultyStudentAssignment
        fields = ('id', 'faculty', 'student', 'assigned_by', 'assigned_at')


class AttendanceRecordSerializer(serializers.ModelSerializer):
    roll_number = serializers.CharField(source='student.roll_number', read_only=True)

    class Meta:
        model = AttendanceRecord
        fields = (
            'id', 'student', 'roll_number', 'faculty', 'subject', 'subject_code', 'date', 'status',
            'semester', 'academic_year', 'class_type', 'duration_minutes', 'remarks', 'marking_source',
            'created_at', 'updated_at',
        )
        read_only_fields = fields


class AttendanceEntrySerializer(serializers.Serializer):
    student = serializers.IntegerField(source='student_id', min_value=1)
    faculty = serializers.IntegerField(source='faculty_id', min_value=1, required=False)
    subject = serializers.CharField(max_length=100)
    subject_code = serializers.CharField(max_length=32)
    date = serializers.DateField()
    status = serializers.ChoiceField(choices=AttendanceRecord.Status.choices)
    semester = serializers.IntegerField(min_value=MIN_SEMESTER, max_value=MAX_SEMESTER)
    academic_year = serializers.CharField(max_length=9, validators=[academic_year_validator])
    class_type = serializers.ChoiceField(choices=AttendanceRecord.ClassType.choices, required=False)
    duration_minutes = serializers.IntegerField(min_value=15, max_value=300, required=False)
    remarks = serializers.CharField(max_length=500, required=False, allow_blank=True)


class AttendanceBulkSerializer(serializers.Serializer):
    records = AttendanceEntrySerializer(many=True, allow_empty=False)


class AttendanceUpdateSerializer(serializers.Serializer):
    subject = serializers.CharField(max_length=100, required=False)
    subject_code = serializers.CharField(max_length=32, required=False)
    date = serializers.DateField(required=False)
    status = serializers.ChoiceField(choices=AttendanceRecord.Status.choices, required=False)
    class_type = serializers.ChoiceField(choices=AttendanceRecord.ClassType.choices, required=False)
    duration_minutes = serializers.IntegerField(min_value=15, max_value=300, required=False)
    remarks = serializers.CharField(max_length=500, required=False, allow_blank=True)


class MarksRecordSerializer(serializers.ModelSerializer):
    roll_number = serializers.CharField(source='student.roll_number', read_only=True)

    class Meta:
        model = MarksRecord
        fields = (
            'id', 'student', 'roll_number', 'faculty', 'subject', 'subject_code', 'exam_type',
            'raw_score', 'max_score', 'percentage', 'letter_grade', 'grade_points', 'credits',
            'semester', 'academic_year', 'exam_date', 'remarks', 'is_published', 'published_at',
            'created_at', 'updated_at',
        )
        read_only_fields = fields


class MarksEntrySerializer(serializers.Serializer):
    student = serializers.IntegerField(source='student_id', min_value=1)
    faculty = serializers.IntegerField(source='faculty_id', min_value=1, required=False)
    subject = serializers.CharField(max_length=100)
    subject_code = serializers.CharField(max_length=32)
    exam_type = serializers.ChoiceField(choices=MarksRecord.ExamType.choices)
    raw_score = serializers.FloatField(min_value=0)
    max_score = serializers.FloatField()
    credits = serializers.IntegerField(min_value=1, max_value=10, required=False)
    semester = serializers.IntegerField(min_value=MIN_SEMESTER, max_value=MAX_SEMESTER)
    academic_year = serializers.CharField(max_length=9, validators=[academic_year_validator])
    exam_date = serializers.DateField(required=False, allow_null=True)
    remarks = serializers.CharField(max_length=500, required=False, allow_blank=True)

    def validate(self, attrs):
        if attrs['max_score'] <= 0:
            raise serializers.ValidationError({'max_score': ['Maximum score must be greater than zero.']})
        if attrs['raw_score'] > attrs['max_score']:
            raise serializers.ValidationError({'raw_score': ['Score cannot exceed maximum score.']})
        return attrs


class MarksBulkSerializer(serializers.Serializer):
    records = MarksEntrySerializer(many=True, allow_empty=False)
    publish = serializers.BooleanField(default=False)


class MarksPublishSerializer(serializers.Serializer):
    record_ids = serializers.ListField(child=serializers.IntegerField(min_value=1), allow_empty=False)
    publish = serializers.BooleanField(default=True)
