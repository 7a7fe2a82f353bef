"""Authenticated actor passed explicitly into every resolver and workflow call."""
from dataclasses import dataclass

from accounts.models import User

ADMIN = User.Role.ADMIN.value
FACULTY = User.Role.FACULTY.value
STUDENT = User.Role.STUDENT.value


@dataclass(frozen=True)
class Principal:
    id: int
    role: str

    @classmethod
    def from_user(cls, user) -> 'Principal':
        if user is None or not getattr(user, 'is_authenticated', False):
            raise ValueError('an authenticated user is required')
        role = ADMIN if getattr(user, 'is_superuser', False) else user.role
        return cls(id=user.pk, role=role)

    @classmethod
    def from_request(cls, request) -> 'Principal':
        return cls.from_user(getattr(request, 'user', None))

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN

    @property
    def is_faculty(self) -> bool:
        return self.role == FACULTY

    @property
    def is_student(self) -> bool:
        return self.role == STUDENT
