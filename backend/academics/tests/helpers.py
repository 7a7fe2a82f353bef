from django.contrib.auth import get_user_model

from accounts.principal import Principal
from academics.models import FacultyProfile, StudentProfile

User = get_user_model()


def make_admin(username='admin'):
    return User.objects.create_user(username=username, password='pw123456', role=User.Role.ADMIN)


def make_student(username, roll_number=None, semester=1, course='BSc', department='CS', email=''):
    user = User.objects.create_user(
        username=username, password='pw123456', role=User.Role.STUDENT, email=email or f'{username}@example.com'
    )
    profile = StudentProfile.objects.create(
        user=user,
        roll_number=roll_number or f'R-{username}',
        semester=semester,
        course=course,
        department=department,
        enrollment_year=2024,
    )
    return user, profile


def make_faculty(username, employee_code=None, department='CS'):
    user = User.objects.create_user(
        username=username, password='pw123456', role=User.Role.FACULTY, email=f'{username}@example.com'
    )
    profile = FacultyProfile.objects.create(
        user=user, employee_code=employee_code or f'E-{username}', department=department
    )
    return user, profile


def principal(user):
    return Principal.from_user(user)


def marks_entry(student, **overrides):
    entry = {
        'student_id': student.pk,
        'subject': 'Algorithms',
        'subject_code': 'CS201',
        'exam_type': 'midterm',
        'raw_score': 45,
        'max_score': 50,
        'credits': 3,
        'semester': 3,
        'academic_year': '2024-2025',
    }
    entry.update(overrides)
    return entry


def attendance_entry(student, **overrides):
    entry = {
        'student_id': student.pk,
        'subject': 'Algorithms',
        'subject_code': 'CS201',
        'date': '2024-09-02',
        'status': 'present',
        'semester': 3,
        'academic_year': '2024-2025',
    }
    entry.update(overrides)
    return entry
