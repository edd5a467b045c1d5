"""Tests for sharing business logic."""

import uuid

import pytest

from server.apps.files.exceptions import (
    FileRecordNotFoundError,
    SelfShareError,
    ShareNotFoundError,
    UserNotFoundError,
)
from server.apps.files.logic.share_operations import (
    list_file_shares,
    list_shared_with,
    revoke_share,
    share_file,
)
from server.apps.files.models import FileShare, SharePermission


@pytest.mark.django_db
class TestShareFile:
    """Tests for share_file function."""

    def test_share_creates_grant(self, user, other_user, make_file):
        """Test sharing creates a VIEW grant by default."""
        file_instance = make_file()

        share = share_file(user, file_instance.id, 'friend@example.com')

        assert share.user == other_user
        assert share.permission == SharePermission.VIEW

    def test_reshare_updates_permission(self, user, other_user, make_file):
        """Test sharing twice keeps one grant with the latest permission."""
        file_instance = make_file()

        share_file(user, file_instance.id, 'friend@example.com')
        share_file(
            user,
            file_instance.id,
            'Friend@Example.com',
            SharePermission.EDIT,
        )

        shares = FileShare.objects.filter(file=file_instance)
        assert shares.count() == 1
        assert shares.get().permission == SharePermission.EDIT

    def test_share_with_self(self, user, make_file):
        """Test self-share is rejected without creating a row."""
        file_instance = make_file()

        with pytest.raises(SelfShareError):
            share_file(user, file_instance.id, 'test@example.com')

        assert not FileShare.objects.exists()

    def test_share_with_unknown_user(self, user, make_file):
        """Test unknown email fails with USER_001."""
        file_instance = make_file()

        with pytest.raises(UserNotFoundError):
            share_file(user, file_instance.id, 'nobody@example.com')

    def test_share_foreign_file(self, user, other_user, make_file):
        """Test only the owner can share."""
        foreign = make_file(owner=other_user)

        with pytest.raises(FileRecordNotFoundError):
            share_file(user, foreign.id, 'friend@example.com')

    def test_share_trashed_file(self, user, other_user, make_file):
        """Test trashed files cannot be shared."""
        file_instance = make_file(trashed=True)

        with pytest.raises(FileRecordNotFoundError):
            share_file(user, file_instance.id, 'friend@example.com')


@pytest.mark.django_db
class TestRevokeShare:
    """Tests for revoke_share function."""

    def test_owner_revokes(self, user, other_user, make_file):
        """Test owner can delete a grant."""
        file_instance = make_file()
        share = FileShare.objects.create(file=file_instance, user=other_user)

        revoke_share(user, file_instance.id, share.id)

        assert not FileShare.objects.filter(id=share.id).exists()

    def test_grantee_cannot_revoke(self, user, other_user, make_file):
        """Test grantees cannot revoke grants on files they do not own."""
        file_instance = make_file()
        share = FileShare.objects.create(file=file_instance, user=other_user)

        with pytest.raises(FileRecordNotFoundError):
            revoke_share(other_user, file_instance.id, share.id)

        assert FileShare.objects.filter(id=share.id).exists()

    def test_share_of_another_file(self, user, other_user, make_file):
        """Test a grant id must belong to the given file."""
        mine = make_file('mine.pdf')
        theirs = make_file('theirs.pdf', owner=other_user)
        share = FileShare.objects.create(file=theirs, user=user)

        with pytest.raises(ShareNotFoundError):
            revoke_share(user, mine.id, share.id)

        assert FileShare.objects.filter(id=share.id).exists()

    def test_unknown_share(self, user, make_file):
        """Test unknown grant id fails with SHARE_001."""
        file_instance = make_file()

        with pytest.raises(ShareNotFoundError):
            revoke_share(user, file_instance.id, uuid.uuid4())


@pytest.mark.django_db
class TestShareListings:
    """Tests for list_file_shares and list_shared_with."""

    def test_list_file_shares(self, user, other_user, make_file):
        """Test owner sees grants on the file."""
        file_instance = make_file()
        FileShare.objects.create(file=file_instance, user=other_user)

        shares = list(list_file_shares(user, file_instance.id))

        assert [share.user for share in shares] == [other_user]

    def test_list_file_shares_foreign(self, user, other_user, make_file):
        """Test grants on another user's file are hidden."""
        foreign = make_file(owner=other_user)

        with pytest.raises(FileRecordNotFoundError):
            list_file_shares(user, foreign.id)

    def test_shared_with_me(self, user, other_user, make_file):
        """Test grantee sees shared files, minus the owner's trash."""
        visible = make_file('a.pdf')
        hidden = make_file('b.pdf', trashed=True)
        FileShare.objects.create(file=visible, user=other_user)
        FileShare.objects.create(file=hidden, user=other_user)

        shares = list(list_shared_with(other_user))

        assert [share.file.name for share in shares] == ['a.pdf']
        assert shares[0].file.user == user
        assert list(list_shared_with(user)) == []
