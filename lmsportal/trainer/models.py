"""
Trainer app models - course authoring structure
Profiles, courses, modules, lessons, quizzes with their questions and options, and the audit log
"""
from django.db import models
from django.utils import timezone
import uuid


class Profile(models.Model):
    """User profile - learners, trainers, managers and admins"""
    ROLE_CHOICES = [('admin', 'admin'), ('trainer', 'trainer'), ('manager', 'manager'), ('trainee', 'trainee')]
    STATUS_CHOICES = [('active', 'active'), ('inactive', 'inactive'), ('archived', 'archived')]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, db_column='user_id')
    first_name = models.CharField(max_length=100, db_column='first_name')
    last_name = models.CharField(max_length=100, db_column='last_name')
    email = models.EmailField(unique=True, db_column='email')
    password = models.CharField(max_length=255, db_column='password_hash')

    primary_role = models.CharField(
        max_length=50,
        db_column='primary_role',
        choices=ROLE_CHOICES,
        default='trainee'
    )
    status = models.CharField(
        max_length=20,
        db_column='status',
        choices=STATUS_CHOICES,
        default='active'
    )
    last_login = models.DateTimeField(blank=True, null=True, db_column='last_login')
    created_at = models.DateTimeField(default=timezone.now, db_column='created_at')
    updated_at = models.DateTimeField(auto_now=True, db_column='updated_at')

    class Meta:
        db_table = 'users'
        managed = True

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def auth_username(self):
        """Username of the Django auth user backing this profile's API token"""
        return f"user_{self.id}"

    def __str__(self):
        return self.full_name or self.email


class Course(models.Model):
    """Courses in the LMS"""

    STATUS_CHOICES = [
        ('draft', 'Draft'),
        ('published', 'Published'),
        ('archived', 'Archived'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, db_column='course_id')
    title = models.CharField(max_length=500, db_column='title')
    description = models.TextField(blank=True, null=True, db_column='description')
    status = models.CharField(
        max_length=20,
        default='draft',
        choices=STATUS_CHOICES,
        db_column='status'
    )
    pass_mark = models.IntegerField(default=70, db_column='pass_mark')

    created_by = models.ForeignKey(
        Profile, on_delete=models.SET_NULL, null=True, blank=True,
        related_name='created_courses', db_column='created_by'
    )
    created_at = models.DateTimeField(default=timezone.now, db_column='created_at')
    updated_at = models.DateTimeField(auto_now=True, db_column='updated_at')

    class Meta:
        db_table = 'courses'
        managed = True
        ordering = ['-created_at']

    def __str__(self):
        return self.title

    def all_lessons(self):
        """Every lesson across every module of the course"""
        return Lesson.objects.filter(module__course=self)


class Module(models.Model):
    """Ordered section of a course"""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, db_column='module_id')
    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name='modules', db_column='course_id')
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)
    order = models.IntegerField(default=0, db_column='sequence_order')
    created_at = models.DateTimeField(default=timezone.now, db_column='created_at')

    class Meta:
        db_table = 'modules'
        managed = True
        ordering = ['course', 'order']

    def __str__(self):
        return self.title


class Lesson(models.Model):
    """Lesson inside a module"""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, db_column='lesson_id')
    module = models.ForeignKey(Module, on_delete=models.CASCADE, related_name='lessons', db_column='module_id')
    title = models.CharField(max_length=255)
    content_html = models.TextField(blank=True, default='', db_column='content_html')
    order = models.IntegerField(default=0, db_column='order')
    created_at = models.DateTimeField(default=timezone.now, db_column='created_at')

    class Meta:
        db_table = 'lessons'
        managed = True
        ordering = ['module', 'order']

    def __str__(self):
        return self.title


class Quiz(models.Model):
    """Quiz attached to a course - Maps to quizzes table"""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, db_column='id')
    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name='quizzes', db_column='course_id')
    title = models.CharField(max_length=255, db_column='title')
    pass_mark_override = models.IntegerField(blank=True, null=True, db_column='pass_mark_override')
    attempts_allowed = models.IntegerField(default=1, db_column='attempts_allowed')
    time_limit_sec = models.IntegerField(blank=True, null=True, db_column='time_limit_sec')
    randomize = models.BooleanField(default=False, db_column='randomize')
    created_at = models.DateTimeField(default=timezone.now, db_column='created_at')

    class Meta:
        db_table = 'quizzes'
        managed = True

    def __str__(self):
        return self.title

    @property
    def pass_mark(self):
        """Quiz override when set, otherwise the course pass mark"""
        if self.pass_mark_override is not None:
            return self.pass_mark_override
        return self.course.pass_mark


class Question(models.Model):
    """Quiz questions - Maps to questions table"""
    SINGLE_CHOICE = 'single_choice'
    MULTI_CHOICE = 'multi_choice'
    TRUE_FALSE = 'true_false'
    SHORT_ANSWER = 'short_answer'

    QUESTION_TYPES = [
        (SINGLE_CHOICE, 'Single Choice'),
        (MULTI_CHOICE, 'Multiple Choice'),
        (TRUE_FALSE, 'True/False'),
        (SHORT_ANSWER, 'Short Answer'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, db_column='id')
    quiz = models.ForeignKey(Quiz, on_delete=models.CASCADE, related_name='questions', db_column='quiz_id')
    type = models.CharField(max_length=30, choices=QUESTION_TYPES, db_column='type')
    prompt_html = models.TextField(db_column='prompt_html')
    explanation_html = models.TextField(blank=True, null=True, db_column='explanation_html')
    points = models.PositiveIntegerField(default=1, db_column='points')
    order = models.IntegerField(default=0, db_column='order')

    class Meta:
        db_table = 'questions'
        managed = True
        ordering = ['quiz', 'order']


class QuestionOption(models.Model):
    """Answer option of a choice question"""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, db_column='id')
    question = models.ForeignKey(Question, on_delete=models.CASCADE, related_name='options', db_column='question_id')
    label = models.TextField(db_column='label')
    is_correct = models.BooleanField(default=False, db_column='is_correct')
    order = models.IntegerField(default=0, db_column='order')

    class Meta:
        db_table = 'question_options'
        managed = True
        ordering = ['question', 'order']


class AuditLog(models.Model):
    """Audit logging for system actions"""
    log_id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, db_column='log_id')
    user = models.ForeignKey(Profile, on_delete=models.SET_NULL, null=True, blank=True, db_column='user_id')
    action_type = models.CharField(max_length=100, db_column='action_type')
    entity_type = models.CharField(max_length=50, blank=True, null=True, db_column='entity_type')
    entity_id = models.CharField(max_length=255, blank=True, null=True, db_column='entity_id')
    details = models.JSONField(default=dict, db_column='details')
    ip_address = models.CharField(max_length=45, blank=True, null=True, db_column='ip_address')
    user_agent = models.TextField(blank=True, null=True, db_column='user_agent')
    timestamp = models.DateTimeField(default=timezone.now, db_column='timestamp')

    class Meta:
        db_table = 'audit_logs'
        managed = True
        indexes = [
            models.Index(fields=['user', 'timestamp'], name='idx_audit_user_time'),
            models.Index(fields=['action_type'], name='idx_audit_action'),
            models.Index(fields=['entity_type'], name='idx_audit_entity'),
        ]
