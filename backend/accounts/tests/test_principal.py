from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from django.test import TestCase

from accounts.principal import Principal, ADMIN, FACULTY, STUDENT


class PrincipalTests(TestCase):
    def setUp(self):
        User = get_user_model()
        self.student = User.objects.create_user(username='student', password='pw', role=STUDENT)
        self.faculty = User.objects.create_user(username='faculty', password='pw', role=FACULTY)
        self.superuser = User.objects.create_superuser(username='root', password='pw', email='root@example.com')

    def test_role_comes_from_user(self):
        p = Principal.from_user(self.student)
        self.assertEqual(p, Principal(id=self.student.pk, role=STUDENT))
        self.assertTrue(p.is_student)
        self.assertFalse(p.is_admin)

        p = Principal.from_user(self.faculty)
        self.assertTrue(p.is_faculty)

    def test_superuser_is_always_admin(self):
        self.assertEqual(self.superuser.role, ADMIN)
        # even if the stored role drifted
        self.superuser.role = STUDENT
        self.assertTrue(Principal.from_user(self.superuser).is_admin)

    def test_anonymous_user_rejected(self):
        with self.assertRaises(ValueError):
            Principal.from_user(AnonymousUser())
        with self.assertRaises(ValueError):
            Principal.from_user(None)

    def test_principal_is_immutable(self):
        p = Principal.from_user(self.student)
        with self.assertRaises(Exception):
            p.role = ADMIN
