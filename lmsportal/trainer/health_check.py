"""
Health Check Views

Liveness and readiness of the LMS API:
- Database connectivity
- Required tables
- Certificate storage
"""

import logging
import os

from django.apps import apps
from django.conf import settings
from django.db import connection, DatabaseError
from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

logger = logging.getLogger(__name__)

LMS_APPS = ('trainer', 'trainee')


class HealthCheckService:
    """Service for performing health checks on system components."""

    @staticmethod
    def check_database():
        """
        Check database connectivity.

        Returns:
            dict: Health status with details
        """
        try:
            with connection.cursor() as cursor:
                cursor.execute("SELECT 1")
            return {
                'status': 'healthy',
                'database': 'connected',
                'vendor': connection.vendor,
            }
        except DatabaseError as e:
            logger.error(f"[HEALTH] Database health check failed: {e}")
            return {
                'status': 'unhealthy',
                'database': 'disconnected',
                'error': str(e)
            }

    @staticmethod
    def check_tables():
        """
        Verify that the tables of the LMS models exist.

        Returns:
            dict: Table status with the missing table names
        """
        required = {
            model._meta.db_table
            for app_label in LMS_APPS
            for model in apps.get_app_config(app_label).get_models()
        }
        try:
            existing = set(connection.introspection.table_names())
        except DatabaseError as e:
            logger.error(f"[HEALTH] Table health check failed: {e}")
            return {'status': 'unhealthy', 'error': str(e)}

        missing = sorted(required - existing)
        return {
            'status': 'healthy' if not missing else 'degraded',
            'total_required': len(required),
            'missing': missing,
        }

    @staticmethod
    def check_certificate_storage():
        """Certificate PDFs are written under CERTIFICATES_ROOT"""
        root = str(settings.CERTIFICATES_ROOT)
        target = root if os.path.isdir(root) else os.path.dirname(root)
        writable = os.access(target, os.W_OK)
        return {
            'status': 'healthy' if writable else 'degraded',
            'path': root,
            'writable': writable,
        }

    @staticmethod
    def get_system_status():
        """
        Get overall system health status.

        Returns:
            dict: Complete system status
        """
        checks = {
            'database': HealthCheckService.check_database(),
            'tables': HealthCheckService.check_tables(),
            'certificates': HealthCheckService.check_certificate_storage(),
        }
        statuses = [check.get('status') for check in checks.values()]

        # Overall status is worst status among checks
        if 'unhealthy' in statuses:
            overall = 'unhealthy'
        elif 'degraded' in statuses:
            overall = 'degraded'
        else:
            overall = 'healthy'

        return {
            'status': overall,
            'timestamp': timezone.now().isoformat(),
            'checks': checks,
        }


# Health Check Endpoints

@api_view(['GET'])
@permission_classes([AllowAny])
def health_check(request):
    """
    Simple health check endpoint.

    Returns:
        Response: JSON with database health
    """
    health = HealthCheckService.check_database()

    if health['status'] == 'healthy':
        return Response(health, status=status.HTTP_200_OK)
    return Response(health, status=status.HTTP_503_SERVICE_UNAVAILABLE)


@api_view(['GET'])
@permission_classes([AllowAny])
def readiness_check(request):
    """
    Readiness check.

    Returns:
        Response: 200 if system is ready to accept traffic, 503 otherwise
    """
    system_status_data = HealthCheckService.get_system_status()

    # Ready when the database answers and every LMS table exists
    is_ready = (
        system_status_data['checks']['database']['status'] == 'healthy' and
        system_status_data['checks']['tables'].get('missing', []) == []
    )

    if is_ready:
        return Response(
            {'ready': True, 'message': 'System is ready', 'status': system_status_data},
            status=status.HTTP_200_OK
        )
    return Response(
        {'ready': False, 'message': 'System is not ready', 'status': system_status_data},
        status=status.HTTP_503_SERVICE_UNAVAILABLE
    )
