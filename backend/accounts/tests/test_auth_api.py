from django.contrib.auth import get_user_model
from django.core import mail
from django.test import TestCase
from rest_framework.test import APIClient

from academics.models import StudentProfile, FacultyProfile

User = get_user_model()


class RegisterAndTokenTests(TestCase):
    def setUp(self):
        self.client = APIClient()

    def test_register_always_creates_student(self):
        with self.captureOnCommitCallbacks(execute=True):
            resp = self.client.post('/api/accounts/register/', {
                'username': 'newbie',
                'email': 'newbie@example.com',
                'password': 'secret123',
                'role': 'admin',
            }, format='json')
        self.assertEqual(resp.status_code, 201, resp.content)
        user = User.objects.get(username='newbie')
        self.assertEqual(user.role, User.Role.STUDENT)
        self.assertEqual(user.registration_status, User.RegistrationStatus.PENDING)
        self.assertFalse(user.is_active)
        self.assertTrue(user.check_password('secret123'))
        # welcome email goes out after commit
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ['newbie@example.com'])

    def test_register_rejects_short_password(self):
        resp = self.client.post('/api/accounts/register/', {'username': 'x', 'password': '123'}, format='json')
        self.assertEqual(resp.status_code, 400)
        self.assertIn('password', resp.json())
        self.assertEqual(resp.json()['status_code'], 400)

    def test_token_by_username_email_and_roll_number(self):
        user = User.objects.create_user(username='stu', email='stu@example.com', password='pw123456')
        StudentProfile.objects.create(user=user, roll_number='2024CUK00001', enrollment_year=2024)

        for identifier in ('stu', 'stu@example.com', '2024cuk00001'):
            resp = self.client.post('/api/accounts/token/', {'identifier': identifier, 'password': 'pw123456'}, format='json')
            self.assertEqual(resp.status_code, 200, identifier)
            self.assertIn('access', resp.json())
            self.assertIn('refresh', resp.json())

    def test_token_by_employee_code(self):
        user = User.objects.create_user(username='prof', password='pw123456', role=User.Role.FACULTY)
        FacultyProfile.objects.create(user=user, employee_code='FAC77')
        resp = self.client.post('/api/accounts/token/', {'identifier': 'FAC77', 'password': 'pw123456'}, format='json')
        self.assertEqual(resp.status_code, 200)

    def test_bad_password_gives_generic_error(self):
        User.objects.create_user(username='stu', password='pw123456')
        resp = self.client.post('/api/accounts/token/', {'identifier': 'stu', 'password': 'nope'}, format='json')
        self.assertEqual(resp.status_code, 400)
        resp2 = self.client.post('/api/accounts/token/', {'identifier': 'ghost', 'password': 'nope'}, format='json')
        self.assertEqual(resp.json(), resp2.json())


class MeViewTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(username='stu', password='pw')

    def test_requires_authentication(self):
        resp = self.client.get('/api/accounts/me/')
        self.assertEqual(resp.status_code, 401)

    def test_reports_role_and_profile(self):
        self.client.force_authenticate(self.user)
        resp = self.client.get('/api/accounts/me/')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()['role'], 'student')
        self.assertIsNone(resp.json()['profile_id'])

        profile = StudentProfile.objects.create(user=self.user, roll_number='R1', enrollment_year=2024)
        self.client.force_authenticate(User.objects.get(pk=self.user.pk))
        resp = self.client.get('/api/accounts/me/')
        self.assertEqual(resp.json()['profile_id'], profile.pk)
