"""Tests for file HTTP endpoints."""

import json
import uuid

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import Client

from server.apps.files.models import File, FileShare


def _upload(client, name='a.pdf', folder_id=None, size=2048):
    metadata = {'name': name, 'type': 'application/pdf', 'size': size}
    if folder_id is not None:
        metadata['folderId'] = str(folder_id)
    return client.post(
        '/api/files',
        {
            'file': SimpleUploadedFile(name, b'%PDF-1.4 content'),
            'metadata': json.dumps(metadata),
        },
    )


def _post_json(client, url, payload=None):
    return client.post(
        url,
        json.dumps(payload or {}),
        content_type='application/json',
    )


def _names(items):
    return [item['name'] for item in items]


@pytest.mark.django_db
class TestUpload:
    """Tests for POST /api/files."""

    def test_upload_into_folder(self, api_client, mock_s3, make_folder):
        """Test upload into an owned folder shows up in its listing."""
        reports = make_folder('Reports')
        make_folder('Q1', parent=reports)

        response = _upload(api_client, folder_id=reports.id)

        assert response.status_code == 201
        body = response.json()
        assert body['success'] is True
        assert body['data']['name'] == 'a.pdf'
        assert body['data']['folderId'] == str(reports.id)
        assert body['data']['size'] == 2048

        listing = api_client.get(
            '/api/files',
            {'folderId': str(reports.id), 'includeFiles': 'true'},
        ).json()['data']
        assert _names(listing['files']) == ['a.pdf']
        assert _names(listing['folders']) == ['Q1']

    def test_upload_missing_parts(self, api_client, mock_s3):
        """Test missing metadata fails with VALIDATION_002."""
        response = api_client.post(
            '/api/files',
            {'file': SimpleUploadedFile('a.pdf', b'data')},
        )

        assert response.status_code == 400
        assert response.json()['code'] == 'VALIDATION_002'

    def test_upload_bad_metadata(self, api_client, mock_s3):
        """Test invalid metadata fields are reported per field."""
        response = api_client.post(
            '/api/files',
            {
                'file': SimpleUploadedFile('a.pdf', b'data'),
                'metadata': json.dumps({'name': '', 'type': 'x', 'size': 0}),
            },
        )

        body = response.json()
        assert response.status_code == 400
        assert body['code'] == 'VALIDATION_001'
        assert set(body['details']) == {'name', 'size'}

    def test_upload_into_unknown_folder(self, api_client, mock_s3):
        """Test unknown folder fails with FOLDER_001."""
        response = _upload(api_client, folder_id=uuid.uuid4())

        assert response.status_code == 404
        assert response.json()['code'] == 'FOLDER_001'

    def test_upload_too_large(self, api_client, mock_s3, settings):
        """Test oversized uploads fail with FILE_004."""
        settings.DRIVE_MAX_UPLOAD_BYTES = 10

        response = _upload(api_client)

        assert response.status_code == 413
        assert response.json()['code'] == 'FILE_004'

    def test_upload_requires_login(self, mock_s3):
        """Test anonymous uploads fail with AUTH_001."""
        response = _upload(Client())

        assert response.status_code == 401
        assert response.json() == {
            'success': False,
            'error': 'Unauthorized access',
            'code': 'AUTH_001',
        }


@pytest.mark.django_db
class TestLifecycle:
    """Star, trash, restore and delete through the API."""

    def test_star_trash_restore(self, api_client, make_file):
        """Test starred and trash listings follow the file state."""
        file_instance = make_file('a.pdf')
        base = f'/api/files/{file_instance.id}'

        response = _post_json(api_client, f'{base}/star', {'starred': True})
        assert response.status_code == 200
        starred = api_client.get('/api/files', {'type': 'starred'}).json()
        assert _names(starred['data']['files']) == ['a.pdf']

        trashed = _post_json(api_client, f'{base}/trash').json()['data']
        assert trashed['trashedAt'] is not None

        starred = api_client.get('/api/files', {'type': 'starred'}).json()
        assert starred['data']['files'] == []
        trash = api_client.get('/api/files', {'type': 'trash'}).json()
        assert _names(trash['data']['files']) == ['a.pdf']
        assert trash['data']['files'][0]['trashedAt'] is not None

        response = _post_json(api_client, f'{base}/restore')
        assert response.status_code == 200
        trash = api_client.get('/api/files', {'type': 'trash'}).json()
        assert trash['data']['files'] == []
        root = api_client.get('/api/files', {'includeFiles': 'true'}).json()
        assert _names(root['data']['files']) == ['a.pdf']

    def test_star_requires_flag(self, api_client, make_file):
        """Test star payload must carry the flag."""
        file_instance = make_file()

        response = _post_json(api_client, f'/api/files/{file_instance.id}/star')

        assert response.status_code == 400
        assert 'starred' in response.json()['details']

    def test_trash_unknown_file(self, api_client):
        """Test trashing an unknown file fails with FILE_001."""
        response = _post_json(api_client, f'/api/files/{uuid.uuid4()}/trash')

        assert response.status_code == 404
        assert response.json()['code'] == 'FILE_001'

    def test_restore_active_file(self, api_client, make_file):
        """Test restoring a file outside trash fails with FILE_002."""
        file_instance = make_file()

        response = _post_json(
            api_client,
            f'/api/files/{file_instance.id}/restore',
        )

        assert response.status_code == 404
        assert response.json()['code'] == 'FILE_002'

    def test_permanent_delete(self, api_client, mock_s3, make_file):
        """Test trashed file is deleted with an empty 204."""
        file_instance = make_file(trashed=True)

        response = api_client.delete(f'/api/files/{file_instance.id}')

        assert response.status_code == 204
        assert response.content == b''
        assert not File.objects.filter(id=file_instance.id).exists()

    def test_permanent_delete_active(self, api_client, mock_s3, make_file):
        """Test active file cannot be purged."""
        file_instance = make_file()

        response = api_client.delete(f'/api/files/{file_instance.id}')

        assert response.status_code == 400
        assert response.json()['code'] == 'FILE_003'

    def test_rename_and_move(self, api_client, make_file, make_folder):
        """Test PUT renames and moves in one call."""
        folder = make_folder()
        file_instance = make_file('a.pdf')

        response = api_client.put(
            f'/api/files/{file_instance.id}',
            json.dumps({'name': 'b.pdf', 'folderId': str(folder.id)}),
            content_type='application/json',
        )

        data = response.json()['data']
        assert data['name'] == 'b.pdf'
        assert data['folderId'] == str(folder.id)

    def test_put_foreign_file(self, api_client, other_user, make_file):
        """Test another user's file is not found."""
        foreign = make_file(owner=other_user)

        response = api_client.put(
            f'/api/files/{foreign.id}',
            json.dumps({'name': 'mine.pdf'}),
            content_type='application/json',
        )

        assert response.status_code == 404
        assert response.json()['code'] == 'RESOURCE_001'

    def test_invalid_id(self, api_client):
        """Test non-identifier ids fail validation."""
        response = api_client.get('/api/files/not-an-id')

        assert response.status_code == 400
        assert response.json()['code'] == 'VALIDATION_001'

    def test_method_not_allowed(self, api_client, make_file):
        """Test unsupported methods get the JSON envelope."""
        file_instance = make_file()

        response = api_client.get(f'/api/files/{file_instance.id}/trash')

        assert response.status_code == 405
        assert response.json()['success'] is False

    def test_recent_listing(self, api_client, make_file):
        """Test accessed files appear in recent."""
        file_instance = make_file('a.pdf')
        make_file('untouched.pdf')

        _post_json(api_client, f'/api/files/{file_instance.id}/access')

        recent = api_client.get('/api/files', {'type': 'recent'}).json()
        assert _names(recent['data']['files']) == ['a.pdf']

    def test_unknown_listing_type(self, api_client):
        """Test listing type is validated."""
        response = api_client.get('/api/files', {'type': 'everything'})

        assert response.status_code == 400


@pytest.mark.django_db
class TestSharing:
    """Share endpoints."""

    def test_share_and_reshare(
        self,
        api_client,
        other_user,
        client_for,
        make_file,
    ):
        """Test grantee sees the share, re-sharing updates it in place."""
        file_instance = make_file('a.pdf')
        url = f'/api/files/{file_instance.id}/share'

        response = _post_json(
            api_client,
            url,
            {'email': 'friend@example.com', 'permission': 'VIEW'},
        )
        assert response.status_code == 200

        friend = client_for(other_user)
        shared = friend.get('/api/files', {'type': 'shared'}).json()
        shares = shared['data']['shares']
        assert len(shares) == 1
        assert shares[0]['file']['name'] == 'a.pdf'
        assert shares[0]['permission'] == 'VIEW'
        assert shares[0]['owner']['email'] == 'test@example.com'

        _post_json(
            api_client,
            url,
            {'email': 'friend@example.com', 'permission': 'EDIT'},
        )
        shared = friend.get('/api/files', {'type': 'shared'}).json()
        assert [share['permission'] for share in shared['data']['shares']] == [
            'EDIT',
        ]
        assert FileShare.objects.count() == 1

    def test_self_share(self, api_client, make_file):
        """Test self-share fails with SHARE_001."""
        file_instance = make_file()

        response = _post_json(
            api_client,
            f'/api/files/{file_instance.id}/share',
            {'email': 'test@example.com'},
        )

        assert response.status_code == 400
        assert response.json()['code'] == 'SHARE_001'
        assert not FileShare.objects.exists()

    def test_share_unknown_user(self, api_client, make_file):
        """Test unknown email fails with USER_001."""
        file_instance = make_file()

        response = _post_json(
            api_client,
            f'/api/files/{file_instance.id}/share',
            {'email': 'nobody@example.com'},
        )

        assert response.status_code == 404
        assert response.json()['code'] == 'USER_001'

    def test_list_and_revoke(self, api_client, other_user, make_file):
        """Test owner lists and revokes grants."""
        file_instance = make_file()
        share = FileShare.objects.create(file=file_instance, user=other_user)
        base = f'/api/files/{file_instance.id}/shares'

        listed = api_client.get(base).json()['data']
        assert [item['id'] for item in listed] == [str(share.id)]

        response = api_client.delete(f'{base}/{share.id}')
        assert response.status_code == 204

        response = api_client.delete(f'{base}/{share.id}')
        assert response.status_code == 404
        assert response.json()['code'] == 'SHARE_001'

    def test_grantee_reads_file(self, other_user, client_for, make_file):
        """Test grantee can fetch the file and sees the permission."""
        file_instance = make_file()
        FileShare.objects.create(
            file=file_instance,
            user=other_user,
            permission='EDIT',
        )

        response = client_for(other_user).get(
            f'/api/files/{file_instance.id}',
        )

        assert response.status_code == 200
        assert response.json()['data']['permission'] == 'EDIT'

    def test_stranger_cannot_read(self, other_user, client_for, make_file):
        """Test users without a grant see not found."""
        file_instance = make_file()

        response = client_for(other_user).get(
            f'/api/files/{file_instance.id}',
        )

        assert response.status_code == 404
        assert response.json()['code'] == 'RESOURCE_001'
