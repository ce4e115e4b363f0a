"""
Serializers for learner certificates.
"""
from rest_framework import serializers
from trainee.models import Certificate


class CertificateSerializer(serializers.ModelSerializer):
    """Certificate as listed on the learner certificates page"""
    courseId = serializers.CharField(source='course_id', read_only=True)
    courseTitle = serializers.CharField(source='course.title', read_only=True)
    pdfUrl = serializers.CharField(source='pdf_url', read_only=True)
    maxScore = serializers.IntegerField(source='max_score', read_only=True)
    issuedAt = serializers.DateTimeField(source='issued_at', read_only=True)
    expiryAt = serializers.DateTimeField(source='expiry_at', read_only=True)
    status = serializers.CharField(read_only=True)

    class Meta:
        model = Certificate
        fields = ['id', 'number', 'courseId', 'courseTitle', 'score', 'maxScore', 'pdfUrl', 'issuedAt', 'expiryAt', 'status']
