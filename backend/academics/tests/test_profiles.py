import threading
from unittest import skipIf

from django.contrib.auth import get_user_model
from django.db import connection
from django.db.models.query import QuerySet
from django.test import TestCase, TransactionTestCase
from django.utils import timezone

from academics.models import FacultyProfile, StudentProfile, NOT_ASSIGNED
from academics.services import profiles
from accounts.principal import Principal
from portal.exceptions import AccessDenied

User = get_user_model()


class LazyProfileTests(TestCase):
    def test_student_profile_created_once_with_placeholders(self):
        user = User.objects.create_user(username='stu', password='pw')
        first = profiles.get_or_create_student_profile(user.pk)
        second = profiles.get_or_create_student_profile(user.pk)

        self.assertEqual(first.pk, second.pk)
        self.assertEqual(StudentProfile.objects.filter(user=user).count(), 1)
        year = timezone.now().year
        self.assertEqual(first.roll_number, f'{year}CUK{user.pk:05d}')
        self.assertEqual(first.course, NOT_ASSIGNED)
        self.assertEqual(first.semester, 1)
        self.assertEqual(first.enrollment_year, year)

    def test_faculty_profile_created_once(self):
        user = User.objects.create_user(username='prof', password='pw', role=User.Role.FACULTY)
        first = profiles.get_or_create_faculty_profile(user.pk)
        profiles.get_or_create_faculty_profile(user.pk)
        self.assertEqual(FacultyProfile.objects.filter(user=user).count(), 1)
        self.assertEqual(first.employee_code, f'FAC{user.pk}')

    def test_placeholder_roll_number_padding(self):
        self.assertEqual(profiles.placeholder_roll_number(42, 2025), '2025CUK00042')

    def test_admin_has_no_profile(self):
        admin = User.objects.create_user(username='boss', password='pw', role=User.Role.ADMIN)
        with self.assertRaises(AccessDenied):
            profiles.profile_for(Principal.from_user(admin))

    def test_concurrent_insert_between_lookup_and_create(self):
        user = User.objects.create_user(username='racer', password='pw')
        original_get = QuerySet.get
        raced = []

        def racing_get(qs, *args, **kwargs):
            if qs.model is StudentProfile and not raced:
                raced.append(True)
                # another request wins the insert after this lookup missed
                StudentProfile.objects.create(
                    user_id=user.pk, roll_number='R-racer', course='BSc', department='CS',
                    semester=2, enrollment_year=2024,
                )
                raise StudentProfile.DoesNotExist()
            return original_get(qs, *args, **kwargs)

        QuerySet.get = racing_get
        try:
            profile = profiles.get_or_create_student_profile(user.pk)
        finally:
            QuerySet.get = original_get

        self.assertEqual(raced, [True])
        self.assertEqual(profile.roll_number, 'R-racer')
        self.assertEqual(StudentProfile.objects.filter(user=user).count(), 1)

    def test_taken_employee_code_gets_suffix(self):
        newcomer = User.objects.create_user(username='newprof', password='pw', role=User.Role.FACULTY)
        other = User.objects.create_user(username='oldprof', password='pw', role=User.Role.FACULTY)
        FacultyProfile.objects.create(user=other, employee_code=f'FAC{newcomer.pk}', department='CS')

        profile = profiles.get_or_create_faculty_profile(newcomer.pk)
        self.assertEqual(profile.user_id, newcomer.pk)
        self.assertTrue(profile.employee_code.startswith(f'FAC{newcomer.pk}-'))
        self.assertEqual(profiles.get_or_create_faculty_profile(newcomer.pk).pk, profile.pk)
        self.assertEqual(FacultyProfile.objects.count(), 2)

    def test_taken_roll_number_gets_suffix(self):
        newcomer = User.objects.create_user(username='newstu', password='pw')
        other = User.objects.create_user(username='oldstu', password='pw')
        year = timezone.now().year
        taken = profiles.placeholder_roll_number(newcomer.pk, year)
        StudentProfile.objects.create(user=other, roll_number=taken, course='BSc', department='CS',
                                      semester=1, enrollment_year=year)

        profile = profiles.profile_for(Principal.from_user(newcomer))
        self.assertTrue(profile.roll_number.startswith(f'{taken}-'))


@skipIf(connection.vendor == 'sqlite', 'sqlite serialises writers')
class ConcurrentProfileCreationTests(TransactionTestCase):
    def test_parallel_first_access_creates_one_profile(self):
        user = User.objects.create_user(username='rush', password='pw')
        workers = 4
        barrier = threading.Barrier(workers)
        results, errors = [], []

        def fetch():
            try:
                barrier.wait()
                results.append(profiles.get_or_create_student_profile(user.pk).pk)
            except Exception as exc:
                errors.append(exc)
            finally:
                connection.close()

        threads = [threading.Thread(target=fetch) for _ in range(workers)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(errors, [])
        self.assertEqual(len(set(results)), 1)
        self.assertEqual(StudentProfile.objects.filter(user=user).count(), 1)
