from django.test import TestCase

from academics.models import FacultyStudentAssignment
from academics.services import assignment_registry
from portal.exceptions import NotFound

from .helpers import make_admin, make_faculty, make_student


class AssignmentRegistryTests(TestCase):
    def setUp(self):
        self.admin = make_admin()
        _, self.s1 = make_student('s1')
        _, self.s2 = make_student('s2')
        _, self.f1 = make_faculty('f1')
        _, self.f2 = make_faculty('f2')

    def test_assign_is_idempotent(self):
        first, created = assignment_registry.assign(self.f1.pk, self.s1.pk, assigned_by=self.admin)
        self.assertTrue(created)
        self.assertEqual(first.assigned_by, self.admin)
        second, created = assignment_registry.assign(self.f1.pk, self.s1.pk)
        self.assertFalse(created)
        self.assertEqual(first.pk, second.pk)
        self.assertEqual(FacultyStudentAssignment.objects.count(), 1)

    def test_assign_unknown_ids(self):
        with self.assertRaises(NotFound):
            assignment_registry.assign(999999, self.s1.pk)
        with self.assertRaises(NotFound):
            assignment_registry.assign(self.f1.pk, 999999)

    def test_unassign(self):
        assignment_registry.assign(self.f1.pk, self.s1.pk)
        self.assertTrue(assignment_registry.unassign(self.f1.pk, self.s1.pk))
        self.assertFalse(assignment_registry.unassign(self.f1.pk, self.s1.pk))
        self.assertFalse(assignment_registry.is_assigned(self.f1.pk, self.s1.pk))

    def test_lookups_both_directions(self):
        assignment_registry.assign(self.f1.pk, self.s1.pk)
        assignment_registry.assign(self.f1.pk, self.s2.pk)
        assignment_registry.assign(self.f2.pk, self.s1.pk)

        self.assertEqual(assignment_registry.assigned_student_ids(self.f1.pk), {self.s1.pk, self.s2.pk})
        self.assertEqual(assignment_registry.faculty_for_student(self.s1.pk), {self.f1.pk, self.f2.pk})
        self.assertEqual(assignment_registry.assigned_student_ids(self.f2.pk), {self.s1.pk})
        self.assertTrue(assignment_registry.is_assigned(self.f2.pk, self.s1.pk))
        self.assertFalse(assignment_registry.is_assigned(None, self.s1.pk))
