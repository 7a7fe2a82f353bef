import datetime

from django.core import mail
from django.test import SimpleTestCase, TestCase

from academics.services import assignment_registry
from academics.tests.helpers import make_admin, make_faculty, make_student, principal
from accounts.services import notifications
from leaves.models import LeaveApplication
from leaves.services import leave_workflow
from portal.exceptions import AccessDenied, InvalidStateTransition, NotFound, ValidationError

D = datetime.date


class LeaveDaysTests(SimpleTestCase):
    def test_inclusive_count(self):
        self.assertEqual(leave_workflow.leave_days(D(2024, 3, 1), D(2024, 3, 3)), 3.0)
        self.assertEqual(leave_workflow.leave_days(D(2024, 3, 1), D(2024, 3, 1)), 1.0)

    def test_half_day(self):
        self.assertEqual(leave_workflow.leave_days(D(2024, 3, 1), D(2024, 3, 1), is_half_day=True), 0.5)

    def test_reversed_range(self):
        with self.assertRaises(ValidationError):
            leave_workflow.leave_days(D(2024, 3, 3), D(2024, 3, 1))

    def test_academic_year(self):
        self.assertEqual(leave_workflow.academic_year_bounds('2024-2025'), (D(2024, 7, 1), D(2025, 6, 30)))
        self.assertEqual(leave_workflow.current_academic_year(D(2025, 6, 30)), '2024-2025')
        self.assertEqual(leave_workflow.current_academic_year(D(2025, 7, 1)), '2025-2026')
        with self.assertRaises(ValidationError):
            leave_workflow.academic_year_bounds('2024-2026')


class LeaveWorkflowTests(TestCase):
    def setUp(self):
        self.admin = make_admin()
        self.s_user, self.student = make_student('s1')
        self.f_user, self.faculty = make_faculty('f1')
        self.other_user, _ = make_faculty('f2')
        assignment_registry.assign(self.faculty.pk, self.student.pk)

    def _submit(self, **overrides):
        kwargs = {
            'leave_type': 'sick',
            'reason': 'Fever',
            'from_date': D(2024, 3, 1),
            'to_date': D(2024, 3, 3),
        }
        kwargs.update(overrides)
        return leave_workflow.submit_leave(principal(self.s_user), **kwargs)

    def test_submit_creates_pending_application(self):
        with self.captureOnCommitCallbacks(execute=True):
            application = self._submit()
        self.assertEqual(application.status, LeaveApplication.Status.PENDING)
        self.assertEqual(application.total_days, 3.0)
        self.assertEqual(application.student, self.student)
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].subject, 'Leave application submitted')

    def test_half_day_must_be_single_date(self):
        application = self._submit(to_date=D(2024, 3, 1), is_half_day=True, half_day_period='morning')
        self.assertEqual(application.total_days, 0.5)
        with self.assertRaises(ValidationError):
            self._submit(is_half_day=True, half_day_period='morning')
        with self.assertRaises(ValidationError):
            self._submit(to_date=D(2024, 3, 1), is_half_day=True)

    def test_only_students_apply(self):
        with self.assertRaises(AccessDenied):
            leave_workflow.submit_leave(principal(self.f_user), 'sick', 'x', D(2024, 3, 1), D(2024, 3, 1))
        with self.assertRaises(ValidationError):
            self._submit(reason='   ')
        with self.assertRaises(ValidationError):
            self._submit(leave_type='vacation')

    def test_assigned_faculty_approves(self):
        application = self._submit()
        with self.captureOnCommitCallbacks(execute=True):
            approved = leave_workflow.approve_leave(application, principal(self.f_user), 'Get well')
        self.assertEqual(approved.status, LeaveApplication.Status.APPROVED)
        self.assertEqual(approved.reviewer_id, self.f_user.pk)
        self.assertIsNotNone(approved.review_date)
        self.assertEqual(mail.outbox[-1].subject, 'Leave application approved')
        self.assertIn('Get well', mail.outbox[-1].body)

    def test_unassigned_faculty_denied(self):
        application = self._submit()
        with self.assertRaises(AccessDenied):
            leave_workflow.approve_leave(application, principal(self.other_user))
        application.refresh_from_db()
        self.assertEqual(application.status, LeaveApplication.Status.PENDING)

    def test_student_cannot_approve_own_leave(self):
        application = self._submit()
        with self.assertRaises(AccessDenied):
            leave_workflow.approve_leave(application, principal(self.s_user))

    def test_terminal_states_reject_transitions(self):
        application = self._submit()
        leave_workflow.reject_leave(application, principal(self.admin), 'No documents')
        with self.assertRaises(InvalidStateTransition) as ctx:
            leave_workflow.approve_leave(application, principal(self.admin))
        self.assertEqual(ctx.exception.from_state, 'rejected')
        with self.assertRaises(InvalidStateTransition):
            leave_workflow.cancel_leave(application, principal(self.s_user))

    def test_authorization_checked_before_state(self):
        application = self._submit()
        leave_workflow.approve_leave(application, principal(self.admin))
        with self.assertRaises(AccessDenied):
            leave_workflow.reject_leave(application, principal(self.other_user))

    def test_cancel_only_by_applicant(self):
        application = self._submit()
        with self.assertRaises(AccessDenied):
            leave_workflow.cancel_leave(application, principal(self.admin))
        other_student, _ = make_student('s2')
        with self.assertRaises(AccessDenied):
            leave_workflow.cancel_leave(application, principal(other_student))
        cancelled = leave_workflow.cancel_leave(application.pk, principal(self.s_user))
        self.assertEqual(cancelled.status, LeaveApplication.Status.CANCELLED)

    def test_missing_application(self):
        with self.assertRaises(NotFound):
            leave_workflow.approve_leave(987654, principal(self.admin))

    def test_comments_length_checked(self):
        application = self._submit()
        with self.assertRaises(ValidationError):
            leave_workflow.approve_leave(application, principal(self.admin), 'x' * 301)

    def test_notification_failure_does_not_undo_decision(self):
        application = self._submit()

        def boom(*args, **kwargs):
            raise OSError('smtp down')

        original = notifications.send_mail
        notifications.send_mail = boom
        try:
            with self.captureOnCommitCallbacks(execute=True):
                leave_workflow.approve_leave(application, principal(self.admin))
        finally:
            notifications.send_mail = original
        application.refresh_from_db()
        self.assertEqual(application.status, LeaveApplication.Status.APPROVED)

    def test_scoped_leaves(self):
        application = self._submit()
        self.assertEqual(list(leave_workflow.scoped_leaves(principal(self.f_user))), [application])
        self.assertEqual(list(leave_workflow.scoped_leaves(principal(self.other_user))), [])
        other_student, _ = make_student('s2')
        self.assertEqual(list(leave_workflow.scoped_leaves(principal(other_student))), [])

    def test_leave_stats_counts_approved_in_year(self):
        admin = principal(self.admin)
        a = self._submit(from_date=D(2024, 9, 2), to_date=D(2024, 9, 4))
        b = self._submit(leave_type='personal', from_date=D(2025, 1, 10), to_date=D(2025, 1, 10),
                         is_half_day=True, half_day_period='afternoon')
        c = self._submit(from_date=D(2024, 10, 1), to_date=D(2024, 10, 1))
        outside = self._submit(from_date=D(2025, 7, 1), to_date=D(2025, 7, 2))
        for application in (a, b, outside):
            leave_workflow.approve_leave(application, admin)
        leave_workflow.reject_leave(c, admin)

        stats = leave_workflow.leave_stats(self.student.pk, '2024-2025')
        self.assertEqual(stats['by_type'], {
            'personal': {'total_days': 0.5, 'count': 1},
            'sick': {'total_days': 3.0, 'count': 1},
        })
        self.assertEqual(stats['total_approved_days'], 3.5)
