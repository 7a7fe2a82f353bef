from django.contrib import admin
from django.test import RequestFactory, TestCase

from academics.admin import MarksRecordAdmin
from academics.models import MarksRecord
from academics.services import marks_service

from .helpers import make_admin, make_faculty, make_student, marks_entry, principal


class MarksRecordAdminTests(TestCase):
    def setUp(self):
        self.admin_user = make_admin()
        _, self.student = make_student('s1')
        _, self.other = make_student('s2')
        _, self.faculty = make_faculty('f1')
        self.model_admin = MarksRecordAdmin(MarksRecord, admin.site)
        self.request = RequestFactory().post('/admin/academics/marksrecord/')
        self.request.user = self.admin_user

        entries = [
            marks_entry(self.student, faculty_id=self.faculty.pk),
            marks_entry(self.other, faculty_id=self.faculty.pk),
        ]
        marks_service.upsert_marks(principal(self.admin_user), entries, publish=True)

    def test_bulk_delete_refreshes_every_student(self):
        self.student.refresh_from_db()
        self.assertEqual(self.student.cumulative_gpa, 10.0)
        self.assertEqual(self.student.total_credits, 3)

        self.model_admin.delete_queryset(self.request, MarksRecord.objects.all())

        self.assertFalse(MarksRecord.objects.exists())
        for profile in (self.student, self.other):
            profile.refresh_from_db()
            self.assertEqual(profile.cumulative_gpa, 0.0)
            self.assertEqual(profile.total_credits, 0)

    def test_bulk_delete_leaves_other_students_alone(self):
        self.model_admin.delete_queryset(self.request, MarksRecord.objects.filter(student=self.student))

        self.student.refresh_from_db()
        self.other.refresh_from_db()
        self.assertEqual(self.student.cumulative_gpa, 0.0)
        self.assertEqual(self.other.cumulative_gpa, 10.0)

    def test_single_delete_refreshes_student(self):
        record = MarksRecord.objects.get(student=self.student)
        self.model_admin.delete_model(self.request, record)
        self.student.refresh_from_db()
        self.assertEqual(self.student.cumulative_gpa, 0.0)
