"""Tests for file operations business logic."""

import uuid
from datetime import timedelta
from unittest.mock import patch

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.db import DatabaseError
from django.utils import timezone

from server.apps.files.exceptions import (
    FileRecordNotFoundError,
    FolderNotFoundError,
    UploadTooLargeError,
)
from server.apps.files.logic.file_operations import (
    get_file,
    list_files,
    list_recent_files,
    list_starred_files,
    move_file,
    record_access,
    rename_file,
    set_starred,
    upload_file,
)
from server.apps.files.models import File, FileShare, SharePermission
from server.common.exceptions import ResourceNotFoundError, StorageError

BUCKET_NAME = 'cloud-drive'


def _bucket_keys(mock_s3):
    return [obj.key for obj in mock_s3.Bucket(BUCKET_NAME).objects.all()]


@pytest.mark.django_db
class TestUploadFile:
    """Tests for upload_file function."""

    def test_upload_into_folder(self, user, mock_s3, make_folder, sample_upload):
        """Test upload stores the blob under owner and folder."""
        folder = make_folder('Reports')

        file_instance = upload_file(
            user,
            sample_upload,
            name='a.pdf',
            mime_type='application/pdf',
            size_bytes=2048,
            folder_id=folder.id,
        )

        assert file_instance.folder_id == folder.id
        assert file_instance.size_bytes == 2048
        assert file_instance.storage_path.startswith(f'{user.id}/{folder.id}/')
        assert file_instance.storage_path.endswith('-a.pdf')
        assert file_instance.url.endswith(file_instance.blob_id)
        assert _bucket_keys(mock_s3) == [file_instance.storage_path]

    def test_upload_to_root(self, user, mock_s3, sample_upload):
        """Test upload without folder lands at root."""
        file_instance = upload_file(
            user,
            sample_upload,
            name='a.pdf',
            mime_type='application/pdf',
            size_bytes=2048,
        )

        assert file_instance.folder_id is None
        assert file_instance.storage_path.count('/') == 1

    def test_same_name_uploads_do_not_collide(self, user, mock_s3):
        """Test identically named uploads get distinct blobs."""
        first = upload_file(
            user,
            SimpleUploadedFile('a.txt', b'one'),
            name='a.txt',
            mime_type='text/plain',
            size_bytes=3,
        )
        second = upload_file(
            user,
            SimpleUploadedFile('a.txt', b'two'),
            name='a.txt',
            mime_type='text/plain',
            size_bytes=3,
        )

        assert first.storage_path != second.storage_path
        assert len(_bucket_keys(mock_s3)) == 2

    def test_upload_into_foreign_folder(
        self,
        user,
        other_user,
        mock_s3,
        make_folder,
        sample_upload,
    ):
        """Test another user's folder fails with FOLDER_001."""
        foreign = make_folder(owner=other_user)

        with pytest.raises(FolderNotFoundError):
            upload_file(
                user,
                sample_upload,
                name='a.pdf',
                mime_type='application/pdf',
                size_bytes=2048,
                folder_id=foreign.id,
            )

        assert _bucket_keys(mock_s3) == []
        assert not File.objects.exists()

    def test_upload_too_large(self, user, mock_s3, sample_upload, settings):
        """Test size limit is enforced before storing anything."""
        settings.DRIVE_MAX_UPLOAD_BYTES = 1024

        with pytest.raises(UploadTooLargeError):
            upload_file(
                user,
                sample_upload,
                name='a.pdf',
                mime_type='application/pdf',
                size_bytes=2048,
            )

        assert _bucket_keys(mock_s3) == []

    def test_db_failure_rolls_back_blob(self, user, mock_s3, sample_upload):
        """Test blob is removed when the record cannot be written."""
        with patch.object(
            File.objects,
            'create',
            side_effect=DatabaseError('insert failed'),
        ):
            with pytest.raises(DatabaseError):
                upload_file(
                    user,
                    sample_upload,
                    name='a.pdf',
                    mime_type='application/pdf',
                    size_bytes=2048,
                )

        assert _bucket_keys(mock_s3) == []

    def test_storage_failure(self, user, mock_s3, sample_upload):
        """Test missing bucket surfaces as StorageError with no record."""
        mock_s3.Bucket(BUCKET_NAME).delete()

        with pytest.raises(StorageError):
            upload_file(
                user,
                sample_upload,
                name='a.pdf',
                mime_type='application/pdf',
                size_bytes=2048,
            )

        assert not File.objects.exists()


@pytest.mark.django_db
class TestRenameAndMove:
    """Tests for rename_file and move_file functions."""

    def test_rename(self, user, make_file):
        """Test rename only changes the display name."""
        file_instance = make_file('a.pdf')
        storage_path = file_instance.storage_path

        rename_file(user, file_instance.id, 'b.pdf')

        file_instance.refresh_from_db()
        assert file_instance.name == 'b.pdf'
        assert file_instance.storage_path == storage_path

    def test_rename_foreign_file(self, user, other_user, make_file):
        """Test another user's file looks missing."""
        foreign = make_file(owner=other_user)

        with pytest.raises(ResourceNotFoundError):
            rename_file(user, foreign.id, 'mine.pdf')

    def test_move_to_folder_and_back(self, user, make_file, make_folder):
        """Test moving into a folder and back to root."""
        folder = make_folder()
        file_instance = make_file()

        move_file(user, file_instance.id, folder.id)
        file_instance.refresh_from_db()
        assert file_instance.folder_id == folder.id

        move_file(user, file_instance.id, None)
        file_instance.refresh_from_db()
        assert file_instance.folder_id is None

    def test_move_to_foreign_folder(
        self,
        user,
        other_user,
        make_file,
        make_folder,
    ):
        """Test target folder must be owned."""
        foreign = make_folder(owner=other_user)
        file_instance = make_file()

        with pytest.raises(FolderNotFoundError):
            move_file(user, file_instance.id, foreign.id)


@pytest.mark.django_db
class TestStarAndAccess:
    """Tests for set_starred and record_access functions."""

    def test_star_is_idempotent(self, user, make_file):
        """Test starring twice equals starring once."""
        file_instance = make_file()

        set_starred(user, file_instance.id, starred=True)
        set_starred(user, file_instance.id, starred=True)

        file_instance.refresh_from_db()
        assert file_instance.starred is True

    def test_star_trashed_file(self, user, make_file):
        """Test trashed files cannot be starred."""
        file_instance = make_file(trashed=True)

        with pytest.raises(FileRecordNotFoundError):
            set_starred(user, file_instance.id, starred=True)

    def test_owner_access(self, user, make_file):
        """Test owner access bumps last_accessed_at."""
        file_instance = make_file()

        record_access(user, file_instance.id)

        file_instance.refresh_from_db()
        assert file_instance.last_accessed_at is not None

    def test_grantee_access(self, user, other_user, make_file):
        """Test share grantees may record access."""
        file_instance = make_file()
        FileShare.objects.create(
            file=file_instance,
            user=other_user,
            permission=SharePermission.VIEW,
        )

        record_access(other_user, file_instance.id)

        file_instance.refresh_from_db()
        assert file_instance.last_accessed_at is not None

    def test_stranger_access(self, user, other_user, make_file):
        """Test users without a grant cannot touch the file."""
        file_instance = make_file()

        with pytest.raises(FileRecordNotFoundError):
            record_access(other_user, file_instance.id)

    def test_get_file_for_grantee(self, user, other_user, make_file):
        """Test grantees can read, strangers cannot."""
        file_instance = make_file()

        with pytest.raises(ResourceNotFoundError):
            get_file(other_user, file_instance.id)

        FileShare.objects.create(file=file_instance, user=other_user)
        assert get_file(other_user, file_instance.id) == file_instance

    def test_get_missing_file(self, user):
        """Test unknown id is not found."""
        with pytest.raises(ResourceNotFoundError):
            get_file(user, uuid.uuid4())


@pytest.mark.django_db
class TestListings:
    """Tests for listing functions."""

    def test_list_files_by_folder(self, user, make_file, make_folder):
        """Test default listing filters by folder and trash state."""
        folder = make_folder()
        make_file('root.pdf')
        make_file('inside.pdf', folder=folder)
        make_file('gone.pdf', trashed=True)

        assert [item.name for item in list_files(user)] == ['root.pdf']
        assert [
            item.name for item in list_files(user, folder.id)
        ] == ['inside.pdf']

    def test_recent_files(self, user, make_file, settings):
        """Test recent listing is ordered and capped."""
        settings.DRIVE_RECENT_FILES_LIMIT = 2
        now = timezone.now()
        make_file('never.pdf')
        make_file('old.pdf', last_accessed_at=now - timedelta(days=2))
        make_file('mid.pdf', last_accessed_at=now - timedelta(days=1))
        make_file('new.pdf', last_accessed_at=now)

        recent = list_recent_files(user)

        assert [item.name for item in recent] == ['new.pdf', 'mid.pdf']

    def test_starred_files(self, user, make_file):
        """Test starred listing skips trashed files."""
        make_file('star.pdf', starred=True)
        make_file('plain.pdf')
        make_file('trashed.pdf', starred=True, trashed=True)

        assert [
            item.name for item in list_starred_files(user)
        ] == ['star.pdf']
