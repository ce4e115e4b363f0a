"""
Tests for trainer login and course authoring endpoints
"""
from rest_framework import status
from rest_framework.authtoken.models import Token
from rest_framework.test import APIClient, APITestCase

from trainer.models import AuditLog, Course, Lesson, Module, Quiz, Question
from trainee.models import Enrollment, Notification
from trainee.testing import PASSWORD, authenticate, make_course, make_profile, make_question


class LoginTests(APITestCase):

    def setUp(self):
        self.trainer = make_profile('trainer@test.com', role='trainer')
        self.client = APIClient()

    def test_login_returns_token(self):
        response = self.client.post(
            '/api/trainer/auth/login/',
            {'email': 'Trainer@Test.com', 'password': PASSWORD},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['user']['email'], 'trainer@test.com')
        self.assertTrue(Token.objects.filter(key=response.data['token']).exists())
        self.assertTrue(AuditLog.objects.filter(action_type='login', user=self.trainer).exists())

    def test_token_authenticates_learner_endpoints(self):
        token = self.client.post(
            '/api/trainer/auth/login/', {'email': 'trainer@test.com', 'password': PASSWORD}, format='json'
        ).data['token']

        self.client.credentials(HTTP_AUTHORIZATION=f'Token {token}')
        response = self.client.get('/api/trainee/notifications/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_wrong_password(self):
        response = self.client.post(
            '/api/trainer/auth/login/', {'email': 'trainer@test.com', 'password': 'nope'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_inactive_profile_cannot_login(self):
        self.trainer.status = 'inactive'
        self.trainer.save()
        response = self.client.post(
            '/api/trainer/auth/login/', {'email': 'trainer@test.com', 'password': PASSWORD}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_missing_credentials(self):
        response = self.client.post('/api/trainer/auth/login/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class CourseAuthoringTests(APITestCase):

    def setUp(self):
        self.trainer = make_profile('trainer@test.com', role='trainer')
        self.client = APIClient()
        authenticate(self.client, self.trainer)

    def test_create_course_sets_creator(self):
        response = self.client.post(
            '/api/trainer/courses/',
            {'title': 'Python Fundamentals', 'description': 'Basics', 'pass_mark': 80},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        course = Course.objects.get(id=response.data['id'])
        self.assertEqual(course.created_by, self.trainer)
        self.assertEqual(course.pass_mark, 80)
        self.assertTrue(AuditLog.objects.filter(action_type='course_create', entity_id=str(course.id)).exists())

    def test_pass_mark_out_of_range(self):
        response = self.client.post('/api/trainer/courses/', {'title': 'X', 'pass_mark': 120}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_is_audited_with_changes(self):
        course = make_course(created_by=self.trainer)

        response = self.client.patch(f'/api/trainer/courses/{course.id}/', {'pass_mark': 90}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        audit = AuditLog.objects.get(action_type='course_update')
        self.assertEqual(audit.details['changes'], {'pass_mark': {'before': 70, 'after': 90}})

    def test_trainer_cannot_edit_another_trainers_course(self):
        other = make_profile('other.trainer@test.com', role='trainer')
        course = make_course(created_by=other)

        response = self.client.patch(f'/api/trainer/courses/{course.id}/', {'title': 'Mine'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_trainee_cannot_author(self):
        client = APIClient()
        authenticate(client, make_profile('trainee@test.com'))

        response = client.post('/api/trainer/courses/', {'title': 'Nope'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class QuestionAuthoringTests(APITestCase):

    def setUp(self):
        self.trainer = make_profile('trainer@test.com', role='trainer')
        self.quiz = Quiz.objects.create(course=make_course(created_by=self.trainer), title='Quiz')
        self.client = APIClient()
        authenticate(self.client, self.trainer)

    def create_question(self, question_type, options, points=2):
        return self.client.post(
            '/api/trainer/questions/',
            {
                'quiz': str(self.quiz.id),
                'type': question_type,
                'prompt_html': '<p>Pick</p>',
                'points': points,
                'options': [
                    {'label': label, 'is_correct': is_correct, 'order': order}
                    for order, (label, is_correct) in enumerate(options)
                ],
            },
            format='json'
        )

    def test_single_choice_with_options(self):
        response = self.create_question(Question.SINGLE_CHOICE, [('A', True), ('B', False)])

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        question = Question.objects.get(id=response.data['id'])
        self.assertEqual(question.options.count(), 2)
        self.assertEqual(question.options.filter(is_correct=True).count(), 1)

    def test_single_choice_needs_exactly_one_correct(self):
        response = self.create_question(Question.SINGLE_CHOICE, [('A', True), ('B', True)])
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.create_question(Question.TRUE_FALSE, [('True', False), ('False', False)])
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_multi_choice_needs_a_correct_option(self):
        response = self.create_question(Question.MULTI_CHOICE, [('A', False), ('B', False)])
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.create_question(Question.MULTI_CHOICE, [('A', True), ('B', True), ('C', False)])
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_short_answer_takes_no_options(self):
        response = self.create_question(Question.SHORT_ANSWER, [('A', True)])
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.create_question(Question.SHORT_ANSWER, [])
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_replace_options_on_update(self):
        question_id = self.create_question(Question.SINGLE_CHOICE, [('A', True), ('B', False)]).data['id']

        response = self.client.patch(
            f'/api/trainer/questions/{question_id}/',
            {'options': [{'label': 'X', 'is_correct': False}, {'label': 'Y', 'is_correct': True}]},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        labels = list(Question.objects.get(id=question_id).options.values_list('label', flat=True))
        self.assertEqual(sorted(labels), ['X', 'Y'])

    def test_points_must_be_positive(self):
        response = self.create_question(Question.SINGLE_CHOICE, [('A', True), ('B', False)], points=0)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('points', response.data)
        self.assertFalse(Question.objects.filter(quiz=self.quiz).exists())


class QuizAuthoringTests(APITestCase):

    def setUp(self):
        self.trainer = make_profile('trainer@test.com', role='trainer')
        self.course = make_course(created_by=self.trainer)
        self.quiz = Quiz.objects.create(course=self.course, title='Quiz')
        self.client = APIClient()
        authenticate(self.client, self.trainer)

    def test_pass_mark_override_out_of_range(self):
        for value in (250, -1):
            response = self.client.patch(
                f'/api/trainer/quizzes/{self.quiz.id}/', {'pass_mark_override': value}, format='json'
            )
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
            self.assertIn('pass_mark_override', response.data)

        self.quiz.refresh_from_db()
        self.assertIsNone(self.quiz.pass_mark_override)

    def test_pass_mark_override_can_be_set_and_cleared(self):
        response = self.client.patch(
            f'/api/trainer/quizzes/{self.quiz.id}/', {'pass_mark_override': 100}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['pass_mark'], 100)

        response = self.client.patch(
            f'/api/trainer/quizzes/{self.quiz.id}/', {'pass_mark_override': None}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['pass_mark'], 70)

    def test_create_quiz_with_override(self):
        response = self.client.post(
            '/api/trainer/quizzes/',
            {'course': str(self.course.id), 'title': 'Final', 'pass_mark_override': 0},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Quiz.objects.get(id=response.data['id']).pass_mark, 0)


class ForeignCourseAuthoringTests(APITestCase):
    """A trainer cannot change the modules, lessons, quizzes, questions or enrollments of another trainer's course"""

    def setUp(self):
        self.owner = make_profile('owner@test.com', role='trainer')
        self.course = make_course(created_by=self.owner)
        self.module = self.course.modules.get()
        self.lesson = self.module.lessons.order_by('order').first()
        self.quiz = Quiz.objects.create(course=self.course, title='Quiz')
        self.question = make_question(self.quiz)

        self.intruder = make_profile('intruder@test.com', role='trainer')
        self.client = APIClient()
        authenticate(self.client, self.intruder)

    def test_cannot_update_questions(self):
        response = self.client.patch(
            f'/api/trainer/questions/{self.question.id}/',
            {'options': [{'label': 'X', 'is_correct': True}, {'label': 'Y', 'is_correct': False}]},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        labels = sorted(self.question.options.values_list('label', flat=True))
        self.assertEqual(labels, ['A', 'B'])

    def test_cannot_add_questions(self):
        response = self.client.post(
            '/api/trainer/questions/',
            {
                'quiz': str(self.quiz.id),
                'type': Question.SINGLE_CHOICE,
                'prompt_html': '<p>Extra</p>',
                'options': [{'label': 'A', 'is_correct': True}],
            },
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(self.quiz.questions.count(), 1)

    def test_cannot_change_quiz_pass_mark(self):
        response = self.client.patch(
            f'/api/trainer/quizzes/{self.quiz.id}/', {'pass_mark_override': 0}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.quiz.refresh_from_db()
        self.assertIsNone(self.quiz.pass_mark_override)

    def test_cannot_add_quiz(self):
        response = self.client.post(
            '/api/trainer/quizzes/', {'course': str(self.course.id), 'title': 'Extra'}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(Quiz.objects.filter(course=self.course).count(), 1)

    def test_cannot_add_or_delete_modules(self):
        response = self.client.post(
            '/api/trainer/modules/', {'course': str(self.course.id), 'title': 'Extra'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        response = self.client.delete(f'/api/trainer/modules/{self.module.id}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.assertEqual(list(Module.objects.filter(course=self.course)), [self.module])

    def test_cannot_change_or_add_lessons(self):
        response = self.client.patch(f'/api/trainer/lessons/{self.lesson.id}/', {'title': 'Hijacked'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        response = self.client.post(
            '/api/trainer/lessons/', {'module': str(self.module.id), 'title': 'Extra'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.lesson.refresh_from_db()
        self.assertEqual(self.lesson.title, 'Lesson 1')
        self.assertEqual(Lesson.objects.filter(module=self.module).count(), 2)

    def test_cannot_enroll_learners(self):
        learner = make_profile('trainee@test.com')

        response = self.client.post(
            '/api/trainer/enrollments/',
            {'course': str(self.course.id), 'user': str(learner.id)},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(Enrollment.objects.filter(course=self.course).exists())
        self.assertFalse(Notification.objects.filter(user=learner).exists())

    def test_cannot_move_own_module_into_foreign_course(self):
        own_module = make_course(title='Own', created_by=self.intruder).modules.get()

        response = self.client.patch(
            f'/api/trainer/modules/{own_module.id}/', {'course': str(self.course.id)}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        own_module.refresh_from_db()
        self.assertNotEqual(own_module.course_id, self.course.id)

    def test_can_read_foreign_course_content(self):
        response = self.client.get(f'/api/trainer/quizzes/{self.quiz.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_owner_and_admin_can_change_content(self):
        for profile, title in ((self.owner, 'By owner'), (make_profile('admin@test.com', role='admin'), 'By admin')):
            client = APIClient()
            authenticate(client, profile)

            response = client.patch(f'/api/trainer/lessons/{self.lesson.id}/', {'title': title}, format='json')

            self.assertEqual(response.status_code, status.HTTP_200_OK)
            self.lesson.refresh_from_db()
            self.assertEqual(self.lesson.title, title)


class EnrollmentAuthoringTests(APITestCase):

    def setUp(self):
        self.trainer = make_profile('trainer@test.com', role='trainer')
        self.learner = make_profile('trainee@test.com')
        self.course = make_course(title='Python Fundamentals', created_by=self.trainer)
        self.client = APIClient()
        authenticate(self.client, self.trainer)

    def test_enrollment_notifies_learner(self):
        response = self.client.post(
            '/api/trainer/enrollments/',
            {'course': str(self.course.id), 'user': str(self.learner.id)},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        enrollment = Enrollment.objects.get(id=response.data['id'])
        self.assertEqual(enrollment.status, Enrollment.ASSIGNED)
        self.assertEqual(enrollment.assigned_by, self.trainer)
        notification = Notification.objects.get(user=self.learner)
        self.assertEqual(notification.subject, 'New Course Assignment: Python Fundamentals')

    def test_duplicate_enrollment_rejected(self):
        payload = {'course': str(self.course.id), 'user': str(self.learner.id)}
        self.client.post('/api/trainer/enrollments/', payload, format='json')

        response = self.client.post('/api/trainer/enrollments/', payload, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class HealthCheckTests(APITestCase):

    def test_health(self):
        response = self.client.get('/api/health/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['database'], 'connected')

    def test_ready(self):
        response = self.client.get('/api/health/ready/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['ready'])
