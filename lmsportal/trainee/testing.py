"""
Fixtures shared by the LMS API tests
"""
import shutil
import tempfile

from django.contrib.auth.hashers import make_password
from django.test import override_settings

from trainer.auth_backend import get_or_create_auth_user
from trainer.models import Profile, Course, Module, Lesson, Quiz, Question, QuestionOption
from trainee.models import Enrollment, Progress

PASSWORD = 'test123'


def make_profile(email, role='trainee', first_name='Test', last_name='User'):
    return Profile.objects.create(
        first_name=first_name,
        last_name=last_name,
        email=email,
        password=make_password(PASSWORD),
        primary_role=role,
        status='active'
    )


def make_course(title='Python Fundamentals', pass_mark=70, lessons=2, created_by=None):
    """Published course with one module holding the given number of lessons"""
    course = Course.objects.create(title=title, status='published', pass_mark=pass_mark, created_by=created_by)
    if lessons:
        module = Module.objects.create(course=course, title='Module 1', order=1)
        for order in range(1, lessons + 1):
            Lesson.objects.create(module=module, title=f'Lesson {order}', order=order)
    return course


def make_question(quiz, question_type=Question.SINGLE_CHOICE, options=(('A', True), ('B', False)), points=1, order=0):
    question = Question.objects.create(
        quiz=quiz,
        type=question_type,
        prompt_html=f'<p>Question {order}</p>',
        explanation_html=f'<p>Explanation {order}</p>',
        points=points,
        order=order,
    )
    for option_order, (label, is_correct) in enumerate(options):
        QuestionOption.objects.create(question=question, label=label, is_correct=is_correct, order=option_order)
    return question


def correct_option_ids(question):
    return [str(opt.id) for opt in question.options.all() if opt.is_correct]


def wrong_option_ids(question):
    return [str(opt.id) for opt in question.options.all() if not opt.is_correct][:1]


def enroll(user, course, status=Enrollment.ASSIGNED):
    return Enrollment.objects.create(user=user, course=course, status=status)


def complete_all_lessons(user, course):
    for lesson in course.all_lessons():
        Progress.objects.update_or_create(user=user, lesson=lesson, defaults={'status': Progress.COMPLETED})


def authenticate(client, profile):
    """Authenticate an APIClient as the Django user backing a profile"""
    client.force_authenticate(user=get_or_create_auth_user(profile))


class TempCertificatesMixin:
    """Points CERTIFICATES_ROOT at a temporary directory for the duration of a test"""

    def setUp(self):
        super().setUp()
        self.certificates_dir = tempfile.mkdtemp(prefix='lms-certs-')
        self.addCleanup(shutil.rmtree, self.certificates_dir, ignore_errors=True)
        certificates_override = override_settings(CERTIFICATES_ROOT=self.certificates_dir)
        certificates_override.enable()
        self.addCleanup(certificates_override.disable)
