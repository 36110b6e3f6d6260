"""Tests for the account and tag registries."""

from pathlib import Path

import pytest

from money_man.config import StorageSettings
from money_man.services.storage import (
    AccountRegistry,
    AlreadyExistsError,
    FlatFileClient,
    InvalidArgumentError,
    LedgerIOError,
    TagRegistry,
)


class TestAccountRegistry:
    """Tests for AccountRegistry."""

    def test_first_access_creates_list_file(self, accounts, project_dir):
        """Test that the account list is initialized when absent."""
        assert accounts.list_names() == []
        assert (project_dir / "accounts.dat").is_file()

    def test_create_appends_in_order(self, accounts, project_dir):
        """Test that names are listed in persisted order."""
        accounts.create("main")
        accounts.create("savings")
        assert accounts.list_names() == ["main", "savings"]
        assert (project_dir / "accounts.dat").read_text() == "main\nsavings\n"

    def test_exists(self, accounts):
        accounts.create("main")
        assert accounts.exists("main") is True
        assert accounts.exists("mai") is False
        assert accounts.exists("savings") is False

    def test_duplicate_create_is_rejected(self, accounts, project_dir):
        """Test that a duplicate reports AlreadyExists and is not appended."""
        accounts.create("main")
        with pytest.raises(AlreadyExistsError):
            accounts.create("main")
        assert (project_dir / "accounts.dat").read_text() == "main\n"

    def test_name_with_delimiter_is_rejected(self, accounts, project_dir):
        """Test that '-' cannot be part of an account name."""
        with pytest.raises(InvalidArgumentError, match="must not contain '-'"):
            accounts.create("main-old")
        assert accounts.list_names() == []

    def test_empty_name_is_rejected(self, accounts):
        with pytest.raises(InvalidArgumentError):
            accounts.create("   ")

    def test_legacy_file_without_trailing_newline(self, accounts, project_dir):
        """Test appending to a hand-edited list missing its last newline."""
        (project_dir / "accounts.dat").write_text("main")
        accounts.create("savings")
        assert accounts.list_names() == ["main", "savings"]

    def test_blank_lines_are_ignored(self, accounts, project_dir):
        (project_dir / "accounts.dat").write_text("main\n\nsavings\n")
        assert accounts.list_names() == ["main", "savings"]

    def test_unusable_project_dir_reports_io_error(self, tmp_path: Path):
        """Test that a missing project directory fails with LedgerIOError."""
        client = FlatFileClient(tmp_path / "missing", StorageSettings())
        with pytest.raises(LedgerIOError):
            AccountRegistry(client).list_names()

    def test_custom_list_file_name(self, project_dir):
        """Test that the list file name comes from the settings."""
        client = FlatFileClient(project_dir, StorageSettings(account_file="acc.list"))
        AccountRegistry(client).create("main")
        assert (project_dir / "acc.list").read_text() == "main\n"


class TestTagRegistry:
    """Tests for TagRegistry."""

    def test_tags_are_independent_of_accounts(self, client, project_dir):
        """Test that both registries use their own file."""
        tags = TagRegistry(client)
        tags.create("food")
        assert AccountRegistry(client).list_names() == []
        assert (project_dir / "tags.dat").read_text() == "food\n"

    def test_duplicate_tag_is_rejected(self, client):
        tags = TagRegistry(client)
        tags.create("food")
        with pytest.raises(AlreadyExistsError):
            tags.create("food")
        assert tags.list_names() == ["food"]

    def test_tag_may_contain_dash(self, client):
        """Test that '-' is fine in tag names."""
        tags = TagRegistry(client)
        tags.create("eating-out")
        assert tags.exists("eating-out")

    def test_tag_with_comma_is_rejected(self, client):
        """Test that a tag cannot contain the row delimiter."""
        tags = TagRegistry(client)
        with pytest.raises(InvalidArgumentError, match="must not contain ','"):
            tags.create("food,drinks")
        assert tags.list_names() == []
