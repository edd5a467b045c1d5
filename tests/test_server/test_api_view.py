"""Tests for the JSON envelope produced by ApiView."""

from unittest.mock import patch

import pytest
from django.contrib.auth import get_user_model
from django.db import OperationalError
from django.test import Client

LIST_CONTENTS = (
    'server.apps.files.logic.folder_operations.list_folder_contents'
)


@pytest.fixture
def api_client(db):
    """Client logged in as a fresh user.

    Returns:
        Authenticated Client.
    """
    account = get_user_model().objects.create_user(
        email='envelope@example.com',
        password='testpass123',
    )
    client = Client()
    client.force_login(account)
    return client


def test_anonymous_request(db):
    """Test missing session fails with AUTH_001."""
    response = Client().get('/api/folders')

    assert response.status_code == 401
    assert response.json()['code'] == 'AUTH_001'


def test_unexpected_error(api_client):
    """Test unknown failures become a generic 500 without a code."""
    with patch(LIST_CONTENTS, side_effect=RuntimeError('boom')):
        response = api_client.get('/api/folders')

    assert response.status_code == 500
    assert response.json() == {
        'success': False,
        'error': 'Internal server error',
    }


def test_database_unavailable(api_client):
    """Test database outages fail with DATABASE_001."""
    with patch(LIST_CONTENTS, side_effect=OperationalError('down')):
        response = api_client.get('/api/folders')

    assert response.status_code == 503
    assert response.json()['code'] == 'DATABASE_001'


def test_success_envelope(api_client):
    """Test successful handlers wrap data in the envelope."""
    response = api_client.get('/api/folders')

    assert response.status_code == 200
    assert response.json() == {
        'success': True,
        'data': {'folders': [], 'files': []},
    }
