"""
Tests for notification delivery, inbox and channel preferences
"""
from datetime import timedelta

from django.core import mail
from django.test import override_settings
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient, APITestCase

from trainee.models import Notification, NotificationPreference
from trainee.services.notifications import NotificationService
from trainee.testing import authenticate, make_profile


class NotificationServiceTests(APITestCase):

    def setUp(self):
        self.learner = make_profile('trainee@test.com')

    @override_settings(LMS_EMAIL_NOTIFICATIONS=True)
    def test_course_completed_sends_email_copy(self):
        notification = NotificationService.notify_course_completed(self.learner, 'Python Fundamentals', 8, 10)

        self.assertEqual(notification.channel, 'in_app')
        self.assertEqual(notification.notification_type, 'completion')
        self.assertIn('8/10 (80%)', notification.body)
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].subject, 'Course Completed: Python Fundamentals')
        self.assertEqual(mail.outbox[0].to, ['trainee@test.com'])
        self.assertIn('text/html', mail.outbox[0].alternatives[0][1])

    def test_course_completed_percentage_rounds_half_up(self):
        notification = NotificationService.notify_course_completed(self.learner, 'Python Fundamentals', 1, 8)
        self.assertIn('1/8 (13%)', notification.body)

    @override_settings(LMS_EMAIL_NOTIFICATIONS=True)
    def test_certificate_issued_mentions_number(self):
        notification = NotificationService.notify_certificate_issued(
            self.learner, 'Python Fundamentals', 'CERT-1-ABCDEF12'
        )

        self.assertEqual(notification.subject, 'Certificate Issued: Python Fundamentals')
        self.assertIn('CERT-1-ABCDEF12', notification.body)
        self.assertIn('CERT-1-ABCDEF12', mail.outbox[0].alternatives[0][0])

    @override_settings(LMS_EMAIL_NOTIFICATIONS=True)
    def test_opted_out_learner_gets_no_email(self):
        NotificationPreference.objects.create(user=self.learner, channel='email', opt_in=False)

        NotificationService.notify_course_completed(self.learner, 'Python Fundamentals', 8, 10)

        self.assertEqual(len(mail.outbox), 0)
        self.assertEqual(Notification.objects.filter(user=self.learner).count(), 1)

    @override_settings(LMS_EMAIL_NOTIFICATIONS=False)
    def test_email_disabled(self):
        NotificationService.notify_assignment_created(self.learner, 'Python Fundamentals')

        self.assertEqual(len(mail.outbox), 0)
        self.assertEqual(Notification.objects.get(user=self.learner).notification_type, 'assignment')

    @override_settings(LMS_EMAIL_NOTIFICATIONS=True)
    def test_email_channel_notification_records_delivery(self):
        notification = NotificationService.create_notification(
            self.learner, 'system', 'email', 'Maintenance tonight', subject='Maintenance'
        )

        self.assertEqual(notification.status, 'sent')
        self.assertEqual(mail.outbox[0].subject, 'Maintenance')

    def test_course_title_is_escaped_in_email(self):
        with override_settings(LMS_EMAIL_NOTIFICATIONS=True):
            NotificationService.notify_course_completed(self.learner, '<b>XSS</b>', 1, 1)
        self.assertIn('&lt;b&gt;XSS&lt;/b&gt;', mail.outbox[0].alternatives[0][0])


class NotificationInboxTests(APITestCase):

    def setUp(self):
        self.learner = make_profile('trainee@test.com')
        self.other = make_profile('other@test.com')
        self.first = NotificationService.notify_assignment_created(self.learner, 'Course A')
        Notification.objects.filter(pk=self.first.pk).update(created_at=timezone.now() - timedelta(minutes=5))
        self.second = NotificationService.notify_course_completed(self.learner, 'Course A', 1, 1)
        NotificationService.notify_assignment_created(self.other, 'Course B')
        self.client = APIClient()
        authenticate(self.client, self.learner)

    def test_list_newest_first_with_unread_count(self):
        response = self.client.get('/api/trainee/notifications/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['unreadCount'], 2)
        ids = [str(n['notification_id']) for n in response.data['notifications']]
        self.assertEqual(ids, [str(self.second.notification_id), str(self.first.notification_id)])

    def test_mark_one_read(self):
        response = self.client.post(f'/api/trainee/notifications/{self.first.notification_id}/read/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.first.refresh_from_db()
        self.assertIsNotNone(self.first.read_at)
        self.assertEqual(self.client.get('/api/trainee/notifications/').data['unreadCount'], 1)

    def test_cannot_mark_another_learners_notification(self):
        foreign = Notification.objects.get(user=self.other)
        response = self.client.post(f'/api/trainee/notifications/{foreign.notification_id}/read/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_mark_all_read(self):
        response = self.client.post('/api/trainee/notifications/read-all/')

        self.assertEqual(response.data['updated'], 2)
        self.assertFalse(Notification.objects.filter(user=self.learner, read_at__isnull=True).exists())
        self.assertTrue(Notification.objects.filter(user=self.other, read_at__isnull=True).exists())

    def test_preferences_default_to_opted_in(self):
        response = self.client.get('/api/trainee/notifications/preferences/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['preferences']['email'])
        self.assertTrue(response.data['preferences']['in_app'])

    def test_update_preferences(self):
        response = self.client.put(
            '/api/trainee/notifications/preferences/',
            {'preferences': {'email': False}},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data['preferences']['email'])
        self.assertFalse(NotificationService.is_opted_in(self.learner, 'email'))

    def test_unknown_channel_rejected(self):
        response = self.client.put(
            '/api/trainee/notifications/preferences/',
            {'preferences': {'pigeon': True}},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Invalid data')
