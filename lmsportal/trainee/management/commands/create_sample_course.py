"""
Management command to create a sample course with a quiz and enrolled learner
Usage: python manage.py create_sample_course
"""
from django.contrib.auth.hashers import make_password
from django.core.management.base import BaseCommand
from django.db import transaction

from trainer.models import Profile, Course, Module, Lesson, Quiz, Question, QuestionOption
from trainee.models import Enrollment

SAMPLE_PASSWORD = 'password123'

SAMPLE_USERS = [
    {'first_name': 'John', 'last_name': 'Doe', 'email': 'john.doe@company.com', 'role': 'trainer'},
    {'first_name': 'Jane', 'last_name': 'Smith', 'email': 'jane.smith@company.com', 'role': 'trainee'},
]

SAMPLE_COURSE = {
    'title': 'Python Fundamentals',
    'description': 'Core Python syntax and data types',
    'pass_mark': 70,
    'modules': [
        {
            'title': 'Getting Started',
            'lessons': ['Installing Python', 'Your first script'],
        },
        {
            'title': 'Data Types',
            'lessons': ['Numbers and strings', 'Lists and tuples'],
        },
    ],
    'quiz': {
        'title': 'Python Basics Quiz',
        'time_limit_sec': 900,
        'questions': [
            {
                'type': Question.SINGLE_CHOICE,
                'prompt': 'What is the correct way to define a function in Python?',
                'options': [('def function_name():', True), ('function function_name():', False),
                            ('define function_name():', False)],
                'points': 5,
                'explanation': 'Functions are defined with the "def" keyword.',
            },
            {
                'type': Question.MULTI_CHOICE,
                'prompt': 'Which of these are built-in sequence types?',
                'options': [('list', True), ('tuple', True), ('array', False)],
                'points': 5,
                'explanation': 'list and tuple are built in; array lives in a module.',
            },
            {
                'type': Question.TRUE_FALSE,
                'prompt': 'len() returns the number of items in an object.',
                'options': [('True', True), ('False', False)],
                'points': 5,
                'explanation': 'len() returns the size of a container.',
            },
        ],
    },
}


class Command(BaseCommand):
    help = 'Create a sample trainer, learner and course with a quiz for development'

    @transaction.atomic
    def handle(self, *args, **options):
        profiles = {}
        for user_data in SAMPLE_USERS:
            profile, created = Profile.objects.get_or_create(
                email=user_data['email'],
                defaults={
                    'first_name': user_data['first_name'],
                    'last_name': user_data['last_name'],
                    'password': make_password(SAMPLE_PASSWORD),
                    'primary_role': user_data['role'],
                    'status': 'active',
                }
            )
            profiles[user_data['role']] = profile
            if created:
                self.stdout.write(self.style.SUCCESS(
                    f'Created {user_data["role"]} user: {profile.email} (password: {SAMPLE_PASSWORD})'
                ))
            else:
                self.stdout.write(self.style.WARNING(f'User {profile.email} already exists'))

        if Course.objects.filter(title=SAMPLE_COURSE['title']).exists():
            self.stdout.write(self.style.WARNING(f'Course {SAMPLE_COURSE["title"]} already exists'))
            return

        course = Course.objects.create(
            title=SAMPLE_COURSE['title'],
            description=SAMPLE_COURSE['description'],
            status='published',
            pass_mark=SAMPLE_COURSE['pass_mark'],
            created_by=profiles['trainer'],
        )
        for module_order, module_data in enumerate(SAMPLE_COURSE['modules'], start=1):
            module = Module.objects.create(course=course, title=module_data['title'], order=module_order)
            for lesson_order, lesson_title in enumerate(module_data['lessons'], start=1):
                Lesson.objects.create(module=module, title=lesson_title, order=lesson_order)

        quiz_data = SAMPLE_COURSE['quiz']
        quiz = Quiz.objects.create(
            course=course,
            title=quiz_data['title'],
            time_limit_sec=quiz_data['time_limit_sec'],
            attempts_allowed=3,
        )
        for question_order, question_data in enumerate(quiz_data['questions'], start=1):
            question = Question.objects.create(
                quiz=quiz,
                type=question_data['type'],
                prompt_html=f"<p>{question_data['prompt']}</p>",
                explanation_html=f"<p>{question_data['explanation']}</p>",
                points=question_data['points'],
                order=question_order,
            )
            for option_order, (label, is_correct) in enumerate(question_data['options'], start=1):
                QuestionOption.objects.create(
                    question=question, label=label, is_correct=is_correct, order=option_order
                )

        Enrollment.objects.create(course=course, user=profiles['trainee'], assigned_by=profiles['trainer'])

        self.stdout.write(self.style.SUCCESS(f'\nCreated course {course.title} (id {course.id})'))
        self.stdout.write(self.style.SUCCESS(f'Quiz {quiz.title} (id {quiz.id}) with {len(quiz_data["questions"])} questions'))
