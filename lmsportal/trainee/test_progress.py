"""
Tests for lesson completion and course progress
"""
import uuid

from rest_framework import status
from rest_framework.test import APIClient, APITestCase

from trainee.models import Enrollment, Progress
from trainee.services.quiz_submission import course_fully_completed
from trainee.testing import authenticate, enroll, make_course, make_profile


class LessonProgressTests(APITestCase):

    def setUp(self):
        self.learner = make_profile('trainee@test.com')
        self.course = make_course(lessons=2)
        self.lessons = list(self.course.all_lessons().order_by('order'))
        self.client = APIClient()
        authenticate(self.client, self.learner)

    def complete(self, lesson_id):
        return self.client.post(f'/api/trainee/lessons/{lesson_id}/complete/', format='json')

    def test_complete_lesson_starts_enrollment(self):
        enrollment = enroll(self.learner, self.course)

        response = self.complete(self.lessons[0].id)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'ok': True})
        progress = Progress.objects.get(user=self.learner, lesson=self.lessons[0])
        self.assertEqual(progress.status, Progress.COMPLETED)
        self.assertIsNotNone(progress.last_viewed_at)
        enrollment.refresh_from_db()
        self.assertEqual(enrollment.status, Enrollment.STARTED)
        self.assertIsNotNone(enrollment.started_at)

    def test_completing_twice_keeps_one_row(self):
        enroll(self.learner, self.course)
        self.complete(self.lessons[0].id)
        self.complete(self.lessons[0].id)
        self.assertEqual(Progress.objects.filter(user=self.learner).count(), 1)

    def test_all_lessons_complete_the_course_lessons(self):
        enroll(self.learner, self.course)
        self.assertFalse(course_fully_completed(self.learner, self.course))

        for lesson in self.lessons:
            self.complete(lesson.id)

        self.assertTrue(course_fully_completed(self.learner, self.course))
        response = self.client.get(f'/api/trainee/courses/{self.course.id}/progress/')
        self.assertEqual(response.data['totalLessons'], 2)
        self.assertEqual(response.data['completedLessons'], 2)
        self.assertEqual(response.data['status'], Enrollment.STARTED)

    def test_not_enrolled(self):
        response = self.complete(self.lessons[0].id)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(Progress.objects.exists())

    def test_unknown_lesson(self):
        response = self.complete(uuid.uuid4())
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
