"""
Audit Log Service - records security relevant actions in the audit_logs table
"""
import logging

from django.db import DatabaseError, transaction

from trainer.models import AuditLog
from trainee.services.auth import client_ip

logger = logging.getLogger(__name__)

SENSITIVE_FIELDS = ('password', 'smtp_password', 'client_secret', 'api_key', 'secret')


class AuditService:
    """Writes audit rows; a failed write is logged and never breaks the calling flow"""

    @staticmethod
    def log(user, action_type, entity_type=None, entity_id=None, request=None, details=None):
        try:
            # Savepoint keeps a failed write from poisoning an enclosing atomic block
            with transaction.atomic():
                return AuditLog.objects.create(
                    user=user,
                    action_type=action_type,
                    entity_type=entity_type,
                    entity_id=str(entity_id) if entity_id is not None else None,
                    details=details or {},
                    ip_address=client_ip(request) if request is not None else None,
                    user_agent=request.META.get('HTTP_USER_AGENT') if request is not None else None,
                )
        except DatabaseError as e:
            logger.error(f"[AUDIT] Failed to write audit log {action_type}: {str(e)}")
            return None

    @staticmethod
    def changed_fields(old_data, new_data):
        """
        Before/after map of the keys whose values differ.
        Sensitive values are masked.
        """
        changes = {}
        for key in set(old_data) | set(new_data):
            before = old_data.get(key)
            after = new_data.get(key)
            if before == after:
                continue
            if any(field in key.lower() for field in SENSITIVE_FIELDS):
                changes[key] = {'before': '***', 'after': '***'}
            else:
                changes[key] = {'before': before, 'after': after}
        return changes
