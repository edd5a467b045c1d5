"""Management command to clean up old files from trash."""

import logging
from typing import Any, Final

from django.core.management.base import BaseCommand

from server.apps.files.logic.trash_operations import (
    expired_trash,
    get_retention_days,
    purge_file,
)

_DEFAULT_BATCH_SIZE: Final = 1000

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Permanently delete files that stayed in trash past retention."""

    help = 'Clean up old files from trash'

    def add_arguments(self, parser: Any) -> None:
        """Add command line arguments.

        Args:
            parser: Argument parser.
        """
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be deleted without deleting',
        )
        parser.add_argument(
            '--batch-size',
            type=int,
            default=_DEFAULT_BATCH_SIZE,
            help=f'Max files to process (default: {_DEFAULT_BATCH_SIZE})',
        )
        parser.add_argument(
            '--days',
            type=int,
            default=None,
            help='Retention period in days (default: DRIVE_TRASH_RETENTION_DAYS)',
        )

    def handle(self, *args: Any, **options: Any) -> None:
        """Execute the cleanup command.

        Args:
            args: Positional arguments (unused).
            options: Command options.
        """
        dry_run = options['dry_run']
        batch_size = options['batch_size']
        days = options['days']
        if days is None:
            days = get_retention_days()

        self.stdout.write(
            f'Looking for files trashed more than {days} days ago',
        )

        old_files = expired_trash(days).select_related('user')[:batch_size]

        count = 0
        failed = 0

        for file_instance in old_files:
            if dry_run:
                self.stdout.write(
                    f'Would delete: {file_instance.name} '
                    f'(user: {file_instance.user.email}, '
                    f'trashed: {file_instance.trashed_at})',
                )
                count += 1
                continue

            try:
                purge_file(file_instance)
            except Exception as exc:
                self.stderr.write(
                    f'Failed to delete {file_instance.id}: {exc}',
                )
                logger.exception(
                    'Failed to purge file from trash: %s',
                    file_instance.id,
                )
                failed += 1
            else:
                count += 1

        if dry_run:
            self.stdout.write(
                self.style.SUCCESS(f'Would purge {count} files from trash'),
            )
        else:
            self.stdout.write(
                self.style.SUCCESS(
                    f'Purged {count} files from trash, {failed} failed',
                ),
            )
