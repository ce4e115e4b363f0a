"""
Trainer app serializers - course structure, quizzes with nested options, and enrollments
"""
from django.db import transaction
from rest_framework import serializers

from .models import Profile, Course, Module, Lesson, Quiz, Question, QuestionOption
from trainee.models import Enrollment


class ProfileSerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(read_only=True)

    class Meta:
        model = Profile
        fields = ['id', 'email', 'first_name', 'last_name', 'full_name', 'primary_role', 'status']
        read_only_fields = fields


class CourseSerializer(serializers.ModelSerializer):
    created_by_name = serializers.SerializerMethodField()
    lessons_count = serializers.SerializerMethodField()

    class Meta:
        model = Course
        fields = [
            'id', 'title', 'description', 'status', 'pass_mark',
            'created_by', 'created_by_name', 'lessons_count', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at', 'created_by']

    def get_created_by_name(self, obj):
        return obj.created_by.full_name if obj.created_by else 'Unknown'

    def get_lessons_count(self, obj):
        return obj.all_lessons().count()

    def validate_pass_mark(self, value):
        if not 0 <= value <= 100:
            raise serializers.ValidationError('Pass mark must be between 0 and 100')
        return value


class ModuleSerializer(serializers.ModelSerializer):
    class Meta:
        model = Module
        fields = ['id', 'course', 'title', 'description', 'order', 'created_at']
        read_only_fields = ['id', 'created_at']


class LessonSerializer(serializers.ModelSerializer):
    course = serializers.CharField(source='module.course_id', read_only=True)

    class Meta:
        model = Lesson
        fields = ['id', 'module', 'course', 'title', 'content_html', 'order', 'created_at']
        read_only_fields = ['id', 'created_at']


class QuestionOptionSerializer(serializers.ModelSerializer):
    id = serializers.UUIDField(read_only=True)

    class Meta:
        model = QuestionOption
        fields = ['id', 'label', 'is_correct', 'order']


class QuestionSerializer(serializers.ModelSerializer):
    """
    Question with its options written in the same request.
    single_choice and true_false need exactly one correct option,
    multi_choice at least one, short_answer takes no options.
    """
    quiz = serializers.PrimaryKeyRelatedField(
        queryset=Quiz.objects.all(),
        many=False,
        required=True,
        help_text='UUID of the quiz'
    )
    options = QuestionOptionSerializer(many=True, required=False)

    class Meta:
        model = Question
        fields = ['id', 'quiz', 'type', 'prompt_html', 'explanation_html', 'points', 'order', 'options']
        read_only_fields = ['id']

    def validate_points(self, value):
        if value < 1:
            raise serializers.ValidationError('Points must be at least 1')
        return value

    def validate(self, attrs):
        question_type = attrs.get('type', getattr(self.instance, 'type', None))

        if 'options' in attrs:
            options = attrs['options']
        elif self.instance is not None:
            options = [{'is_correct': opt.is_correct} for opt in self.instance.options.all()]
        else:
            options = []

        correct = sum(1 for opt in options if opt.get('is_correct'))

        if question_type == Question.SHORT_ANSWER:
            if options:
                raise serializers.ValidationError({'options': 'Short answer questions take no options'})
        elif question_type in (Question.SINGLE_CHOICE, Question.TRUE_FALSE):
            if correct != 1:
                raise serializers.ValidationError({'options': 'Exactly one option must be correct'})
        elif question_type == Question.MULTI_CHOICE:
            if correct < 1:
                raise serializers.ValidationError({'options': 'At least one option must be correct'})

        return attrs

    @transaction.atomic
    def create(self, validated_data):
        options = validated_data.pop('options', [])
        question = Question.objects.create(**validated_data)
        QuestionOption.objects.bulk_create([
            QuestionOption(question=question, **option) for option in options
        ])
        return question

    @transaction.atomic
    def update(self, instance, validated_data):
        options = validated_data.pop('options', None)
        instance = super().update(instance, validated_data)
        if options is not None:
            instance.options.all().delete()
            QuestionOption.objects.bulk_create([
                QuestionOption(question=instance, **option) for option in options
            ])
        return instance


class QuizSerializer(serializers.ModelSerializer):
    questions = QuestionSerializer(many=True, read_only=True)
    pass_mark = serializers.IntegerField(read_only=True)

    class Meta:
        model = Quiz
        fields = [
            'id', 'course', 'title', 'pass_mark_override', 'pass_mark', 'attempts_allowed',
            'time_limit_sec', 'randomize', 'questions', 'created_at'
        ]
        read_only_fields = ['id', 'questions', 'created_at']

    def validate_attempts_allowed(self, value):
        if value < 1:
            raise serializers.ValidationError('At least one attempt must be allowed')
        return value

    def validate_pass_mark_override(self, value):
        # None falls back to the course pass mark
        if value is not None and not 0 <= value <= 100:
            raise serializers.ValidationError('Pass mark must be between 0 and 100')
        return value


class EnrollmentSerializer(serializers.ModelSerializer):
    user = serializers.PrimaryKeyRelatedField(queryset=Profile.objects.all())
    user_name = serializers.CharField(source='user.full_name', read_only=True)
    course_title = serializers.CharField(source='course.title', read_only=True)
    # Populated by perform_create
    assigned_by = serializers.PrimaryKeyRelatedField(read_only=True)

    class Meta:
        model = Enrollment
        fields = [
            'id', 'course', 'course_title', 'user', 'user_name', 'assigned_by', 'status',
            'due_at', 'assigned_at', 'started_at', 'completed_at', 'certificate'
        ]
        read_only_fields = ['id', 'assigned_at', 'started_at', 'completed_at', 'certificate']
