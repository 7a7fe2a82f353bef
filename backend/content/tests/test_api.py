import shutil
import tempfile
from datetime import timedelta

from django.core import mail
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase, override_settings
from django.utils import timezone
from rest_framework.test import APIClient

from academics.tests.helpers import make_admin, make_faculty, make_student
from content.models import Notice, NoticeView, Resource


class NoticeApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.admin = make_admin()
        self.s3_user, self.s3 = make_student('s3', semester=3, course='BA')
        self.s5_user, self.s5 = make_student('s5', semester=5, course='BSc')
        self.f_user, self.faculty = make_faculty('f1')

    def _create(self, user=None, **data):
        payload = {'title': 'Mid-term schedule', 'content': 'Exams start Monday.', 'category': 'exam'}
        payload.update(data)
        self.client.force_authenticate(user or self.f_user)
        return self.client.post('/api/content/notices/', payload, format='json')

    def test_semester_target_reaches_matching_students_only(self):
        resp = self._create(target_semesters=[3])
        self.assertEqual(resp.status_code, 201, resp.content)
        self.assertEqual(resp.json()['owner'], self.faculty.pk)

        self.client.force_authenticate(self.s3_user)
        self.assertEqual(len(self.client.get('/api/content/notices/').json()), 1)
        self.client.force_authenticate(self.s5_user)
        self.assertEqual(self.client.get('/api/content/notices/').json(), [])
        notice_id = resp.json()['id']
        self.assertEqual(self.client.get(f'/api/content/notices/{notice_id}/').status_code, 404)

    def test_students_cannot_retarget_themselves(self):
        self._create(target_departments=['Physics'])

        self.client.force_authenticate(self.s3_user)
        resp = self.client.patch('/api/academics/profile/', {'department': 'Physics'}, format='json')
        self.assertEqual(resp.status_code, 403)
        self.s3.refresh_from_db()
        self.assertEqual(self.s3.department, 'CS')
        self.assertEqual(self.client.get('/api/content/notices/').json(), [])

        self.client.force_authenticate(self.admin)
        resp = self.client.patch(f'/api/academics/students/{self.s3.pk}/', {'department': 'Physics'}, format='json')
        self.assertEqual(resp.status_code, 200, resp.content)

        self.client.force_authenticate(self.s3_user)
        self.assertEqual(len(self.client.get('/api/content/notices/').json()), 1)

    def test_drafts_and_future_notices_hidden(self):
        self._create(all_students=True, is_draft=True)
        self._create(all_students=True, publish_date=(timezone.now() + timedelta(days=2)).isoformat())
        self.client.force_authenticate(self.s3_user)
        self.assertEqual(self.client.get('/api/content/notices/').json(), [])

    def test_expiry_must_follow_publish_date(self):
        now = timezone.now()
        resp = self._create(all_students=True, publish_date=now.isoformat(),
                            expiry_date=(now - timedelta(days=1)).isoformat())
        self.assertEqual(resp.status_code, 400)
        self.assertIn('expiry_date', resp.json())

    def test_views_are_counted_once_per_student(self):
        notice_id = self._create(all_students=True).json()['id']
        self.client.force_authenticate(self.s3_user)
        self.client.get(f'/api/content/notices/{notice_id}/')
        self.client.get(f'/api/content/notices/{notice_id}/')
        self.client.force_authenticate(self.s5_user)
        self.client.get(f'/api/content/notices/{notice_id}/')

        self.assertEqual(Notice.objects.get(pk=notice_id).view_count, 2)
        self.assertEqual(NoticeView.objects.filter(notice_id=notice_id).count(), 2)

    def test_faculty_cannot_touch_others_notice(self):
        notice_id = self._create(user=self.admin, all_students=True).json()['id']
        self.assertIsNone(Notice.objects.get(pk=notice_id).owner)

        self.client.force_authenticate(self.f_user)
        self.assertEqual(self.client.get(f'/api/content/notices/{notice_id}/').status_code, 404)
        self.assertEqual(self.client.delete(f'/api/content/notices/{notice_id}/').status_code, 404)

        self.client.force_authenticate(self.s3_user)
        self.assertEqual(self.client.delete(f'/api/content/notices/{notice_id}/').status_code, 403)

        self.client.force_authenticate(self.admin)
        self.assertEqual(self.client.delete(f'/api/content/notices/{notice_id}/').status_code, 204)
        self.assertFalse(Notice.objects.filter(pk=notice_id).exists())

    def test_important_notice_emails_targeted_students(self):
        with self.captureOnCommitCallbacks(execute=True):
            self._create(target_semesters=[3], is_important=True)
        self.assertEqual([m.to for m in mail.outbox], [[self.s3_user.email]])

    def test_publishing_a_draft_announces_it(self):
        with self.captureOnCommitCallbacks(execute=True):
            notice_id = self._create(all_students=True, is_important=True, is_draft=True).json()['id']
        self.assertEqual(len(mail.outbox), 0)

        with self.captureOnCommitCallbacks(execute=True):
            resp = self.client.patch(f'/api/content/notices/{notice_id}/', {'is_draft': False}, format='json')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(len(mail.outbox), 2)


class ResourceApiTests(TestCase):
    def setUp(self):
        self.media_root = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, self.media_root, ignore_errors=True)
        override = override_settings(MEDIA_ROOT=self.media_root)
        override.enable()
        self.addCleanup(override.disable)

        self.client = APIClient()
        self.s3_user, self.s3 = make_student('s3', semester=3)
        self.s5_user, self.s5 = make_student('s5', semester=5)
        self.f_user, self.faculty = make_faculty('f1')

    def _upload(self, **data):
        payload = {
            'title': 'Week 1 notes',
            'subject': 'Algorithms',
            'resource_type': 'lecture_notes',
            'file': SimpleUploadedFile('week1.txt', b'sorting and searching', content_type='text/plain'),
        }
        payload.update(data)
        self.client.force_authenticate(self.f_user)
        return self.client.post('/api/content/resources/', payload, format='multipart')

    def test_upload_records_file_metadata(self):
        resp = self._upload(target_semesters=[3])
        self.assertEqual(resp.status_code, 201, resp.content)
        resource = Resource.objects.get(pk=resp.json()['id'])
        self.assertEqual(resource.original_name, 'week1.txt')
        self.assertEqual(resource.file_size, len(b'sorting and searching'))
        self.assertEqual(resource.mime_type, 'text/plain')
        self.assertEqual(resource.owner, self.faculty)
        self.assertEqual(resource.target_semesters, [3])
        self.assertTrue(resource.is_active)
        self.assertFalse(resource.is_public)

    def test_download_counts_and_respects_targeting(self):
        resource_id = self._upload(target_semesters=[3]).json()['id']

        self.client.force_authenticate(self.s3_user)
        resp = self.client.get(f'/api/content/resources/{resource_id}/download/')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(b''.join(resp.streaming_content), b'sorting and searching')
        resp.close()
        self.assertIn('attachment', resp['Content-Disposition'])

        self.client.force_authenticate(self.s5_user)
        self.assertEqual(self.client.get(f'/api/content/resources/{resource_id}/download/').status_code, 404)

        self.assertEqual(Resource.objects.get(pk=resource_id).download_count, 1)

    def test_public_resource_visible_to_everyone(self):
        self._upload(is_public=True)
        self.client.force_authenticate(self.s5_user)
        self.assertEqual(len(self.client.get('/api/content/resources/').json()), 1)

    def test_delete_deactivates(self):
        resource_id = self._upload(all_students=True).json()['id']
        self.assertEqual(self.client.delete(f'/api/content/resources/{resource_id}/').status_code, 204)
        self.assertFalse(Resource.objects.get(pk=resource_id).is_active)

        self.client.force_authenticate(self.s3_user)
        self.assertEqual(self.client.get('/api/content/resources/').json(), [])
