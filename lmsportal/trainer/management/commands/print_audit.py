from django.core.management.base import BaseCommand
from django.db import DatabaseError
import json

from trainer.models import AuditLog


class Command(BaseCommand):
    help = 'Print recent rows from audit_logs table'

    def add_arguments(self, parser):
        parser.add_argument('limit', nargs='?', type=int, default=50)
        parser.add_argument('--action', help='Only rows with this action_type')

    def handle(self, *args, **options):
        limit = options.get('limit', 50)
        logs = AuditLog.objects.order_by('-timestamp')
        if options.get('action'):
            logs = logs.filter(action_type=options['action'])

        try:
            rows = list(logs[:limit])
        except DatabaseError as e:
            self.stderr.write(f"Failed to query audit_logs: {e}")
            return

        for row in rows:
            log = {
                'log_id': str(row.log_id),
                'user_id': str(row.user_id) if row.user_id is not None else None,
                'action_type': row.action_type,
                'entity_type': row.entity_type,
                'entity_id': row.entity_id,
                'details': row.details,
                'ip_address': row.ip_address,
                'user_agent': row.user_agent,
                'timestamp': row.timestamp.isoformat(),
            }
            self.stdout.write(json.dumps(log, ensure_ascii=False))
