"""Tests for category membership and attachment operations."""

from unittest.mock import patch

import pytest
from django.db import DatabaseError

from server.apps.files.exceptions import NotFound, StoreUnavailable
from server.apps.files.logic.category_operations import (
    add_file_to_category,
    category_exists,
    delete_attachments_for,
    list_user_categories,
    remove_file_from_category,
)
from server.apps.files.models import Category, CategoryAttachment

_URL = 'https://savespace.s3.amazonaws.com/a.txt'
_OTHER_URL = 'https://savespace.s3.amazonaws.com/b.txt'


@pytest.mark.django_db
class TestListUserCategories:
    """Tests for list_user_categories function."""

    def test_returns_only_owned_categories(self, user, other_user):
        """Test categories are filtered by owner."""
        own = Category.objects.create(created_by=user, name='Mine')
        Category.objects.create(created_by=other_user, name='Theirs')

        assert list_user_categories(user) == [own]

    def test_ordered_by_id(self, user):
        """Test categories come back in creation order."""
        first = Category.objects.create(created_by=user, name='B')
        second = Category.objects.create(created_by=user, name='A')

        assert list_user_categories(user) == [first, second]

    def test_no_categories(self, user):
        """Test a user without categories gets an empty list."""
        assert list_user_categories(user) == []

    def test_database_error(self, user):
        """Test query failures raise StoreUnavailable."""
        with patch.object(
            Category.objects,
            'filter',
            side_effect=DatabaseError('down'),
        ):
            with pytest.raises(StoreUnavailable) as exc_info:
                list_user_categories(user)

        assert exc_info.value.store == 'category'
        assert exc_info.value.operation == 'read_all'
        assert isinstance(exc_info.value.__cause__, DatabaseError)


@pytest.mark.django_db
def test_category_exists(user, other_user, work_category):
    """Test existence is scoped to the owner."""
    assert category_exists(user, work_category.id)
    assert not category_exists(other_user, work_category.id)
    assert not category_exists(user, work_category.id + 100)


@pytest.mark.django_db
def test_category_exists_database_error(user, work_category):
    """Test existence query failures raise StoreUnavailable."""
    with patch.object(
        Category.objects,
        'filter',
        side_effect=DatabaseError('down'),
    ):
        with pytest.raises(StoreUnavailable) as exc_info:
            category_exists(user, work_category.id)

    assert exc_info.value.store == 'category'
    assert exc_info.value.operation == 'read'
    assert isinstance(exc_info.value.__cause__, DatabaseError)


@pytest.mark.django_db
class TestAddFileToCategory:
    """Tests for add_file_to_category function."""

    def test_adds_url(self, user, work_category):
        """Test URL is appended to the files list."""
        changed = add_file_to_category(user, work_category.id, _URL)

        work_category.refresh_from_db()
        assert changed is True
        assert work_category.files == [_URL]

    def test_adding_twice_is_noop(self, user, work_category):
        """Test set-union semantics: no duplicates, no error."""
        add_file_to_category(user, work_category.id, _URL)
        changed = add_file_to_category(user, work_category.id, _URL)

        work_category.refresh_from_db()
        assert changed is False
        assert work_category.files == [_URL]

    def test_keeps_existing_urls(self, user, work_category):
        """Test other members are preserved."""
        work_category.files = [_OTHER_URL]
        work_category.save()

        add_file_to_category(user, work_category.id, _URL)

        work_category.refresh_from_db()
        assert set(work_category.files) == {_URL, _OTHER_URL}

    def test_missing_category(self, user):
        """Test adding to a missing category raises NotFound."""
        with pytest.raises(NotFound) as exc_info:
            add_file_to_category(user, 99999, _URL)

        assert exc_info.value.kind == 'category'

    def test_other_users_category(self, other_user, work_category):
        """Test categories of another user are not found."""
        with pytest.raises(NotFound):
            add_file_to_category(other_user, work_category.id, _URL)

        work_category.refresh_from_db()
        assert work_category.files == []

    def test_database_error(self, user, work_category):
        """Test update failures raise StoreUnavailable."""
        with patch.object(
            Category.objects,
            'select_for_update',
            side_effect=DatabaseError('down'),
        ):
            with pytest.raises(StoreUnavailable) as exc_info:
                add_file_to_category(user, work_category.id, _URL)

        assert exc_info.value.store == 'category'
        assert exc_info.value.operation == 'array_add'
        assert exc_info.value.target == str(work_category.id)
        assert isinstance(exc_info.value.__cause__, DatabaseError)

        work_category.refresh_from_db()
        assert work_category.files == []


@pytest.mark.django_db
class TestRemoveFileFromCategory:
    """Tests for remove_file_from_category function."""

    def test_removes_url(self, user, work_category):
        """Test URL is removed from the files list."""
        work_category.files = [_URL, _OTHER_URL]
        work_category.save()

        changed = remove_file_from_category(user, work_category.id, _URL)

        work_category.refresh_from_db()
        assert changed is True
        assert work_category.files == [_OTHER_URL]

    def test_removing_absent_url_is_noop(self, user, work_category):
        """Test set-difference semantics: absent URL is not an error."""
        work_category.files = [_OTHER_URL]
        work_category.save()

        changed = remove_file_from_category(user, work_category.id, _URL)

        work_category.refresh_from_db()
        assert changed is False
        assert work_category.files == [_OTHER_URL]

    def test_removes_every_duplicate(self, user, work_category):
        """Test duplicate entries are all removed."""
        work_category.files = [_URL, _OTHER_URL, _URL]
        work_category.save()

        remove_file_from_category(user, work_category.id, _URL)

        work_category.refresh_from_db()
        assert work_category.files == [_OTHER_URL]

    def test_missing_category(self, user):
        """Test removing from a missing category raises NotFound."""
        with pytest.raises(NotFound):
            remove_file_from_category(user, 99999, _URL)

    def test_database_error(self, user, work_category):
        """Test update failures raise StoreUnavailable."""
        work_category.files = [_URL]
        work_category.save()

        with patch.object(
            Category.objects,
            'select_for_update',
            side_effect=DatabaseError('down'),
        ):
            with pytest.raises(StoreUnavailable) as exc_info:
                remove_file_from_category(user, work_category.id, _URL)

        assert exc_info.value.store == 'category'
        assert exc_info.value.operation == 'array_remove'
        assert isinstance(exc_info.value.__cause__, DatabaseError)

        work_category.refresh_from_db()
        assert work_category.files == [_URL]


@pytest.mark.django_db
class TestDeleteAttachmentsFor:
    """Tests for delete_attachments_for function."""

    def test_deletes_matching_attachments(self, user, work_category):
        """Test every attachment for the URL is deleted."""
        CategoryAttachment.objects.create(
            category=work_category,
            file_url=_URL,
        )
        CategoryAttachment.objects.create(category=None, file_url=_URL)
        kept = CategoryAttachment.objects.create(
            category=work_category,
            file_url=_OTHER_URL,
        )

        deleted = delete_attachments_for(_URL)

        assert deleted == 2
        assert list(CategoryAttachment.objects.all()) == [kept]

    def test_no_matching_attachments(self, user):
        """Test nothing is deleted when nothing matches."""
        assert delete_attachments_for(_URL) == 0

    def test_database_error(self, user):
        """Test delete failures raise StoreUnavailable."""
        CategoryAttachment.objects.create(category=None, file_url=_URL)

        with patch.object(
            CategoryAttachment.objects,
            'filter',
            side_effect=DatabaseError('down'),
        ):
            with pytest.raises(StoreUnavailable) as exc_info:
                delete_attachments_for(_URL)

        assert exc_info.value.store == 'category'
        assert exc_info.value.operation == 'delete_attachments'
        assert exc_info.value.target == _URL
        assert isinstance(exc_info.value.__cause__, DatabaseError)
        assert CategoryAttachment.objects.count() == 1
