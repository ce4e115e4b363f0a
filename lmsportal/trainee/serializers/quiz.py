"""
Serializers for quiz attempt requests and delivery.
"""
import random

from rest_framework import serializers
from trainer.models import Question, QuestionOption


class SubmittedAnswerSerializer(serializers.Serializer):
    """One answer of a quiz submission"""
    questionId = serializers.CharField()
    optionIds = serializers.ListField(child=serializers.CharField(), required=False)
    responseText = serializers.CharField(required=False, allow_blank=True)


class QuizSubmitSerializer(serializers.Serializer):
    """Body of POST /quizzes/{id}/submit/"""
    attemptId = serializers.CharField()
    answers = SubmittedAnswerSerializer(many=True, required=False)


class DeliveredOptionSerializer(serializers.ModelSerializer):
    """Option as shown to a learner; never exposes is_correct"""
    id = serializers.CharField(read_only=True)

    class Meta:
        model = QuestionOption
        fields = ['id', 'label', 'order']


class DeliveredQuestionSerializer(serializers.ModelSerializer):
    """Question as shown to a learner during an attempt"""
    id = serializers.CharField(read_only=True)
    promptHtml = serializers.CharField(source='prompt_html', read_only=True)
    options = DeliveredOptionSerializer(many=True, read_only=True)

    class Meta:
        model = Question
        fields = ['id', 'type', 'promptHtml', 'points', 'order', 'options']


def delivered_questions(quiz):
    """Serialized questions for a new attempt, shuffled when the quiz asks for it"""
    questions = list(quiz.questions.prefetch_related('options').order_by('order'))
    if quiz.randomize:
        random.shuffle(questions)
    return DeliveredQuestionSerializer(questions, many=True).data
