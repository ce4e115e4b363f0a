"""
Trainee app models - learner state.
Enrollments, lesson progress, quiz attempts and answers, certificates and notifications.

Course structure and profiles live in trainer.models.
"""

import uuid
from django.db import models
from django.utils import timezone
from trainer.models import Profile, Course, Lesson, Quiz, Question, QuestionOption


# ==============================
# ENROLLMENT & PROGRESS
# ==============================

class Enrollment(models.Model):
    """Learner enrollment in a course"""
    ASSIGNED = 'assigned'
    STARTED = 'started'
    COMPLETED = 'completed'

    STATUS_CHOICES = [
        (ASSIGNED, 'Assigned'),
        (STARTED, 'Started'),
        (COMPLETED, 'Completed'),
    ]
    OPEN_STATUSES = [ASSIGNED, STARTED]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, db_column='id')
    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name='enrollments', db_column='course_id')
    user = models.ForeignKey(Profile, on_delete=models.CASCADE, related_name='enrollments', db_column='user_id')
    assigned_by = models.ForeignKey(
        Profile, on_delete=models.SET_NULL, null=True, blank=True,
        related_name='assigned_enrollments', db_column='assigned_by'
    )
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=ASSIGNED, db_column='status')
    due_at = models.DateTimeField(blank=True, null=True, db_column='due_at')
    assigned_at = models.DateTimeField(default=timezone.now, db_column='assigned_at')
    started_at = models.DateTimeField(blank=True, null=True, db_column='started_at')
    completed_at = models.DateTimeField(blank=True, null=True, db_column='completed_at')
    certificate = models.ForeignKey(
        'Certificate', on_delete=models.SET_NULL, null=True, blank=True,
        related_name='enrollments', db_column='certificate_id'
    )

    class Meta:
        db_table = 'enrollments'
        managed = True
        unique_together = ['course', 'user']

    def __str__(self):
        return f"{self.user} - {self.course} ({self.status})"


class Progress(models.Model):
    """Per learner per lesson completion tracking"""
    NOT_STARTED = 'not_started'
    STARTED = 'started'
    COMPLETED = 'completed'

    STATUS_CHOICES = [
        (NOT_STARTED, 'Not Started'),
        (STARTED, 'Started'),
        (COMPLETED, 'Completed'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, db_column='progress_id')
    user = models.ForeignKey(Profile, on_delete=models.CASCADE, related_name='lesson_progress', db_column='user_id')
    lesson = models.ForeignKey(Lesson, on_delete=models.CASCADE, related_name='progress', db_column='lesson_id')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=NOT_STARTED, db_column='status')
    last_viewed_at = models.DateTimeField(blank=True, null=True, db_column='last_viewed_at')
    updated_at = models.DateTimeField(auto_now=True, db_column='updated_at')

    class Meta:
        db_table = 'progress'
        managed = True
        unique_together = ['user', 'lesson']


# ==============================
# QUIZ ATTEMPTS
# ==============================

class QuizAttempt(models.Model):
    """One learner's attempt at a quiz; submitted at most once"""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, db_column='id')
    quiz = models.ForeignKey(Quiz, on_delete=models.CASCADE, related_name='attempts', db_column='quiz_id')
    user = models.ForeignKey(Profile, on_delete=models.CASCADE, related_name='quiz_attempts', db_column='user_id')
    attempt_no = models.IntegerField(default=1, db_column='attempt_no')
    score = models.IntegerField(blank=True, null=True, db_column='score')
    passed = models.BooleanField(default=False, db_column='passed')
    started_at = models.DateTimeField(default=timezone.now, db_column='started_at')
    submitted_at = models.DateTimeField(blank=True, null=True, db_column='submitted_at')

    class Meta:
        db_table = 'quiz_attempts'
        managed = True
        ordering = ['-started_at']

    @property
    def is_submitted(self):
        return self.submitted_at is not None


class QuizAttemptAnswer(models.Model):
    """Answer recorded for one question of a submitted attempt"""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, db_column='id')
    attempt = models.ForeignKey(QuizAttempt, on_delete=models.CASCADE, related_name='answers', db_column='attempt_id')
    question = models.ForeignKey(Question, on_delete=models.CASCADE, related_name='attempt_answers', db_column='question_id')
    option = models.ForeignKey(
        QuestionOption, on_delete=models.SET_NULL, null=True, blank=True,
        related_name='+', db_column='option_id'
    )
    selected_option_ids = models.JSONField(default=list, db_column='selected_option_ids')
    response_text = models.TextField(blank=True, null=True, db_column='response_text')
    is_correct = models.BooleanField(default=False, db_column='is_correct')
    created_at = models.DateTimeField(default=timezone.now, db_column='created_at')

    class Meta:
        db_table = 'quiz_attempt_answers'
        managed = True
        unique_together = ['attempt', 'question']


# ==============================
# CERTIFICATES
# ==============================

class Certificate(models.Model):
    """Certificates issued to learners on course completion"""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, db_column='certificate_id')
    number = models.CharField(max_length=64, unique=True, db_column='number')
    user = models.ForeignKey(Profile, on_delete=models.CASCADE, related_name='certificates', db_column='user_id')
    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name='certificates', db_column='course_id')
    score = models.IntegerField(default=0, db_column='score')
    max_score = models.IntegerField(default=0, db_column='max_score')
    pdf_url = models.CharField(max_length=500, blank=True, null=True, db_column='pdf_url')
    file_path = models.CharField(max_length=500, blank=True, null=True, db_column='file_path')
    issued_at = models.DateTimeField(default=timezone.now, db_column='issued_at')
    expiry_at = models.DateTimeField(blank=True, null=True, db_column='expiry_at')
    revoked_at = models.DateTimeField(blank=True, null=True, db_column='revoked_at')

    class Meta:
        db_table = 'certificates'
        managed = True
        ordering = ['-issued_at']

    def __str__(self):
        return self.number

    @property
    def is_expired(self):
        return self.expiry_at is not None and self.expiry_at < timezone.now()

    @property
    def is_revoked(self):
        return self.revoked_at is not None

    @property
    def status(self):
        if self.is_revoked:
            return 'revoked'
        if self.is_expired:
            return 'expired'
        return 'active'


# ==============================
# NOTIFICATIONS
# ==============================

class Notification(models.Model):
    """System notifications for users"""
    NOTIFICATION_TYPE_CHOICES = [
        ('assignment', 'Assignment'),
        ('reminder', 'Reminder'),
        ('completion', 'Completion'),
        ('expiry', 'Expiry'),
        ('certificate', 'Certificate'),
        ('overdue', 'Overdue'),
        ('system', 'System'),
    ]

    CHANNEL_CHOICES = [
        ('email', 'Email'),
        ('sms', 'SMS'),
        ('whatsapp', 'WhatsApp'),
        ('push', 'Push'),
        ('in_app', 'In App'),
    ]

    STATUS_CHOICES = [
        ('queued', 'Queued'),
        ('sent', 'Sent'),
        ('failed', 'Failed'),
    ]

    notification_id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, db_column='notification_id')
    user = models.ForeignKey(Profile, on_delete=models.CASCADE, related_name='notifications', db_column='user_id')
    notification_type = models.CharField(max_length=50, choices=NOTIFICATION_TYPE_CHOICES, db_column='notification_type')
    channel = models.CharField(max_length=20, choices=CHANNEL_CHOICES, default='in_app', db_column='channel')
    subject = models.CharField(max_length=500, blank=True, null=True, db_column='subject')
    body = models.TextField(db_column='body')
    meta = models.JSONField(default=dict, db_column='meta')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='queued', db_column='status')
    send_at = models.DateTimeField(blank=True, null=True, db_column='send_at')
    read_at = models.DateTimeField(blank=True, null=True, db_column='read_at')
    created_at = models.DateTimeField(default=timezone.now, db_column='created_at')

    class Meta:
        db_table = 'notifications'
        managed = True
        ordering = ['-created_at']

    def mark_as_read(self):
        """Mark notification as read"""
        if self.read_at is None:
            self.read_at = timezone.now()
            self.save(update_fields=['read_at'])


class NotificationPreference(models.Model):
    """Per channel opt-in; a missing row means opted in"""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, db_column='id')
    user = models.ForeignKey(Profile, on_delete=models.CASCADE, related_name='notification_preferences', db_column='user_id')
    channel = models.CharField(max_length=20, choices=Notification.CHANNEL_CHOICES, db_column='channel')
    opt_in = models.BooleanField(default=True, db_column='opt_in')

    class Meta:
        db_table = 'user_notification_preferences'
        managed = True
        unique_together = ['user', 'channel']
