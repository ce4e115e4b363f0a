"""
Django admin configuration for learner state models.
Course structure and profiles are registered in trainer.admin.
"""
from django.contrib import admin
from trainee.models import (
    Enrollment, Progress, QuizAttempt, QuizAttemptAnswer,
    Certificate, Notification, NotificationPreference
)


class QuizAttemptAnswerInline(admin.TabularInline):
    model = QuizAttemptAnswer
    extra = 0
    readonly_fields = ('question', 'option', 'selected_option_ids', 'response_text', 'is_correct')


@admin.register(QuizAttempt)
class QuizAttemptAdmin(admin.ModelAdmin):
    list_display = ('id', 'quiz', 'user', 'attempt_no', 'score', 'passed', 'submitted_at')
    list_filter = ('passed',)
    inlines = [QuizAttemptAnswerInline]


@admin.register(Certificate)
class CertificateAdmin(admin.ModelAdmin):
    list_display = ('number', 'user', 'course', 'score', 'max_score', 'issued_at', 'revoked_at')
    search_fields = ('number',)


# Enrollments & progress
admin.site.register(Enrollment)
admin.site.register(Progress)

# Notifications
admin.site.register(Notification)
admin.site.register(NotificationPreference)
