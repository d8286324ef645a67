"""Tests for categories."""

import pytest

from capitrack.cli.main import cli
from capitrack.domain.category import SYSTEM_CATEGORY_NAMES
from capitrack.domain.errors import ConflictError, ValidationError


def test_create_and_list(category_service):
    category_service.create_category("Groceries")
    category_service.create_category("Salary", kind="income")

    names = {c.name: c.kind for c in category_service.list_categories()}
    assert names == {"Groceries": "EXPENSE", "Salary": "INCOME"}


def test_duplicate_and_invalid(category_service):
    category_service.create_category("Groceries")

    with pytest.raises(ConflictError):
        category_service.create_category("Groceries")
    with pytest.raises(ValidationError):
        category_service.create_category("Gifts", kind="TRANSFER")
    with pytest.raises(ValidationError):
        category_service.create_category("  ")


def test_system_categories_are_flagged_once(category_service):
    created = category_service.ensure_system_categories()
    assert len(created) == len(SYSTEM_CATEGORY_NAMES)
    assert category_service.ensure_system_categories() == []

    category_service.create_category("Groceries")
    visible = [c.name for c in category_service.list_categories(include_system=False)]
    assert visible == ["Groceries"]
    assert all(
        c.is_system_generated
        for c in category_service.list_categories()
        if c.name in SYSTEM_CATEGORY_NAMES
    )


def test_user_category_named_like_system_is_not_flagged(category_service):
    category_service.create_category("Depreciation")

    category = category_service.get_category_by_name("Depreciation")
    assert category.is_system_generated is False


def test_category_cli(cli_runner, temp_db):
    db = ["--db-path", temp_db.database_path]

    result = cli_runner.invoke(cli, db + ["category", "init"])
    assert result.exit_code == 0
    assert "Created 4 system categories" in result.output

    result = cli_runner.invoke(cli, db + ["category", "create", "Rent"])
    assert result.exit_code == 0

    result = cli_runner.invoke(cli, db + ["category", "list"])
    assert "Rent" in result.output
    assert "Depreciation" not in result.output

    result = cli_runner.invoke(cli, db + ["category", "list", "--all"])
    assert "Depreciation" in result.output
    assert "[system]" in result.output

    result = cli_runner.invoke(cli, db + ["category", "create", "Rent"])
    assert result.exit_code == 1
    assert "already exists" in result.output
