"""Shared fixtures for files app tests."""

import boto3
import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import Client
from moto import mock_aws

from server.apps.files.models import File, Folder

BUCKET_NAME = 'cloud-drive'


@pytest.fixture
def mock_s3():
    """Mock S3 service with cloud-drive bucket.

    Yields:
        boto3 S3 resource with cloud-drive bucket created.
    """
    with mock_aws():
        # Create S3 resource
        conn = boto3.resource('s3', region_name='us-east-1')

        # Create bucket
        conn.create_bucket(Bucket=BUCKET_NAME)

        yield conn


@pytest.fixture
def sample_upload():
    """Sample uploaded file for testing.

    Returns:
        SimpleUploadedFile with test data.
    """
    return SimpleUploadedFile(
        'a.pdf',
        b'%PDF-1.4 test content',
        content_type='application/pdf',
    )


@pytest.fixture
def make_folder(user):
    """Factory creating folders directly in the database.

    Returns:
        Callable building a Folder (owner defaults to ``user``).
    """
    def factory(name='Folder', parent=None, owner=None):
        return Folder.objects.create(
            user=owner or user,
            name=name,
            parent=parent,
        )
    return factory


@pytest.fixture
def make_file(user):
    """Factory creating file records without blobs.

    Returns:
        Callable building a File (owner defaults to ``user``).
    """
    def factory(name='a.pdf', folder=None, owner=None, **fields):
        owner = owner or user
        storage_path = f'{owner.id}/{name}'
        fields.setdefault('mime_type', 'application/pdf')
        fields.setdefault('size_bytes', 2048)
        return File.objects.create(
            user=owner,
            folder=folder,
            name=name,
            url=f'https://{BUCKET_NAME}.s3.amazonaws.com/{storage_path}',
            storage_path=storage_path,
            blob_id=name,
            **fields,
        )
    return factory


@pytest.fixture
def client_for():
    """Factory returning a test client logged in as a user.

    Returns:
        Callable taking a user and returning a Client.
    """
    def factory(account):
        client = Client()
        client.force_login(account)
        return client
    return factory


@pytest.fixture
def api_client(user, client_for):
    """Test client logged in as ``user``.

    Returns:
        Authenticated Client.
    """
    return client_for(user)
