"""Shared fixtures for files app tests."""

import boto3
import pytest
from django.contrib.auth import get_user_model
from django.core.files.base import ContentFile
from moto import mock_aws

from server.apps.files.infrastructure.metadata import build_storage_key
from server.apps.files.infrastructure.storage import get_storage
from server.apps.files.models import Category

User = get_user_model()


@pytest.fixture
def user(db):
    """Create test user.

    Returns:
        User instance for testing.
    """
    return User.objects.create_user(
        username='testuser',
        password='testpass123',
        email='test@example.com',
    )


@pytest.fixture
def other_user(db):
    """Create second test user for isolation tests.

    Returns:
        Second user instance.
    """
    return User.objects.create_user(
        username='otheruser',
        password='testpass123',
        email='other@example.com',
    )


@pytest.fixture
def mock_s3():
    """Mock S3 service with savespace bucket.

    Yields:
        boto3 S3 resource with savespace bucket created.
    """
    with mock_aws():
        # Create S3 resource
        conn = boto3.resource('s3', region_name='us-east-1')

        # Create bucket
        conn.create_bucket(Bucket='savespace')

        yield conn


@pytest.fixture
def sample_file_content():
    """Sample file content for testing.

    Returns:
        ContentFile with test data.
    """
    return ContentFile(b'test file content', name='test.txt')


@pytest.fixture
def work_category(user):
    """Create an empty category owned by the test user.

    Returns:
        Category instance.
    """
    return Category.objects.create(created_by=user, name='Work')


@pytest.fixture
def personal_category(user):
    """Create a second empty category owned by the test user.

    Returns:
        Category instance.
    """
    return Category.objects.create(created_by=user, name='Personal')


@pytest.fixture
def store_blob(mock_s3):
    """Put objects into a user's namespace directly through boto3.

    Returns:
        Function taking (owner, file_name, body) and returning the
        download URL of the stored object.
    """
    def factory(owner, file_name, body=b'content'):
        storage_key = build_storage_key(owner, file_name)
        mock_s3.Bucket('savespace').put_object(Key=storage_key, Body=body)
        return get_storage().download_locator(storage_key)

    return factory
