"""Management command to finish interrupted permanent deletions."""

from typing import Any

from django.core.management.base import BaseCommand

from server.apps.files.infrastructure.storage import blob_exists
from server.apps.files.logic.trash_operations import (
    pending_purges,
    reconcile_pending_purges,
)


class Command(BaseCommand):
    """Delete blobs and records of files whose purge never completed."""

    help = 'Finish permanent deletions interrupted after they started'

    def add_arguments(self, parser: Any) -> None:
        """Add command line arguments.

        Args:
            parser: Argument parser.
        """
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='List pending purges without touching them',
        )
        parser.add_argument(
            '--limit',
            type=int,
            default=None,
            help='Max files to process',
        )

    def handle(self, *args: Any, **options: Any) -> None:
        """Execute the reconciliation.

        Args:
            args: Positional arguments (unused).
            options: Command options.
        """
        if options['dry_run']:
            pending = pending_purges()
            if options['limit'] is not None:
                pending = pending[:options['limit']]
            for file_instance in pending:
                blob_state = (
                    'present' if blob_exists(file_instance.storage_path)
                    else 'gone'
                )
                self.stdout.write(
                    f'Pending purge: {file_instance.id} '
                    f'({file_instance.storage_path}, blob {blob_state}, '
                    f'requested: {file_instance.purge_requested_at})',
                )
            return

        purged, failed = reconcile_pending_purges(limit=options['limit'])
        self.stdout.write(
            self.style.SUCCESS(
                f'Reconciled {purged} purges, {failed} failed',
            ),
        )
