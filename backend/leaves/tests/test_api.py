from django.test import TestCase
from rest_framework.test import APIClient

from academics.services import assignment_registry
from academics.tests.helpers import make_admin, make_faculty, make_student


class LeaveApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.admin = make_admin()
        self.s_user, self.student = make_student('s1')
        self.f_user, self.faculty = make_faculty('f1')
        assignment_registry.assign(self.faculty.pk, self.student.pk)

    def _submit(self):
        self.client.force_authenticate(self.s_user)
        resp = self.client.post('/api/leaves/', {
            'leave_type': 'sick',
            'reason': 'Fever',
            'from_date': '2024-03-01',
            'to_date': '2024-03-03',
        }, format='json')
        self.assertEqual(resp.status_code, 201, resp.content)
        return resp.json()

    def test_submit_and_list(self):
        leave = self._submit()
        self.assertEqual(leave['status'], 'pending')
        self.assertEqual(leave['total_days'], 3.0)

        rows = self.client.get('/api/leaves/').json()
        self.assertEqual([r['id'] for r in rows], [leave['id']])

    def test_faculty_cannot_submit(self):
        self.client.force_authenticate(self.f_user)
        resp = self.client.post('/api/leaves/', {
            'leave_type': 'sick', 'reason': 'x', 'from_date': '2024-03-01', 'to_date': '2024-03-01',
        }, format='json')
        self.assertEqual(resp.status_code, 403)

    def test_reversed_dates_rejected(self):
        self.client.force_authenticate(self.s_user)
        resp = self.client.post('/api/leaves/', {
            'leave_type': 'sick', 'reason': 'x', 'from_date': '2024-03-05', 'to_date': '2024-03-01',
        }, format='json')
        self.assertEqual(resp.status_code, 400)
        self.assertIn('from_date', resp.json())

    def test_student_approving_own_leave_is_404(self):
        leave = self._submit()
        resp = self.client.post(f"/api/leaves/{leave['id']}/approve/", {}, format='json')
        self.assertEqual(resp.status_code, 404)

    def test_approve_then_reject_conflicts(self):
        leave = self._submit()
        self.client.force_authenticate(self.f_user)
        resp = self.client.post(f"/api/leaves/{leave['id']}/approve/", {'comments': 'ok'}, format='json')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()['status'], 'approved')
        self.assertEqual(resp.json()['review_comments'], 'ok')

        resp = self.client.post(f"/api/leaves/{leave['id']}/reject/", {}, format='json')
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.json()['from_state'], 'approved')
        self.assertEqual(resp.json()['to_state'], 'rejected')

    def test_cancel(self):
        leave = self._submit()
        resp = self.client.post(f"/api/leaves/{leave['id']}/cancel/")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()['status'], 'cancelled')

    def test_unassigned_faculty_cannot_see_leave(self):
        leave = self._submit()
        other_user, _ = make_faculty('f2')
        self.client.force_authenticate(other_user)
        self.assertEqual(self.client.get(f"/api/leaves/{leave['id']}/").status_code, 404)
        self.assertEqual(self.client.get('/api/leaves/').json(), [])

    def test_stats(self):
        self._submit()
        resp = self.client.get('/api/leaves/stats/?academic_year=2023-2024')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()['total_approved_days'], 0.0)

        self.client.force_authenticate(self.admin)
        self.assertEqual(self.client.get('/api/leaves/stats/').status_code, 400)
        resp = self.client.get(f'/api/leaves/stats/?student={self.student.pk}&academic_year=2023-2024')
        self.assertEqual(resp.json()['student'], self.student.pk)
