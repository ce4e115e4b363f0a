"""
Django admin configuration for course authoring models.
"""
from django.contrib import admin
from trainer.models import (
    Profile, Course, Module, Lesson, Quiz, Question, QuestionOption, AuditLog
)


class QuestionOptionInline(admin.TabularInline):
    model = QuestionOption
    extra = 0


@admin.register(Question)
class QuestionAdmin(admin.ModelAdmin):
    list_display = ('id', 'quiz', 'type', 'points', 'order')
    list_filter = ('type',)
    inlines = [QuestionOptionInline]


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ('timestamp', 'action_type', 'entity_type', 'entity_id', 'user')
    list_filter = ('action_type', 'entity_type')
    readonly_fields = [f.name for f in AuditLog._meta.fields]


# Profiles & course structure
admin.site.register(Profile)
admin.site.register(Course)
admin.site.register(Module)
admin.site.register(Lesson)
admin.site.register(Quiz)
