"""
Shared fixtures for the ledger engine tests.

Every test gets its own project directory under tmp_path, and the
ACC_FILE/TAG_FILE overrides of the developer's shell are removed so
list file names are always the defaults.
"""

import logging
from pathlib import Path

import pytest
import structlog

import money_man.audit.logger as audit_logger_module
from money_man.config import StorageSettings, get_settings
from money_man.services.storage import (
    AccountRegistry,
    FlatFileClient,
    FlatFileLedgerTable,
    TagRegistry,
)


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Keep environment overrides and .env files out of the tests."""
    for name in ("ACC_FILE", "TAG_FILE", "MONEY_MAN_PROJECT_DIR", "MONEY_MAN_LOG_LEVEL",
                 "MONEY_MAN_LOG_JSON"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def _isolate_logging(monkeypatch: pytest.MonkeyPatch):
    """Start every test with logging unconfigured and undo what it attached."""
    pkg_logger = logging.getLogger("money_man")
    handlers = list(pkg_logger.handlers)
    level = pkg_logger.level
    propagate = pkg_logger.propagate
    monkeypatch.setattr(audit_logger_module, "_CONFIGURED", False)
    yield
    pkg_logger.handlers[:] = handlers
    pkg_logger.setLevel(level)
    pkg_logger.propagate = propagate
    structlog.reset_defaults()
    audit_logger_module._configure_structlog()


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    path = tmp_path / "project"
    path.mkdir()
    return path


@pytest.fixture
def run_dir(tmp_path: Path) -> Path:
    path = tmp_path / "run"
    path.mkdir()
    return path


@pytest.fixture
def storage_settings() -> StorageSettings:
    return StorageSettings()


@pytest.fixture
def client(project_dir: Path, storage_settings: StorageSettings) -> FlatFileClient:
    return FlatFileClient(project_dir, storage_settings)


@pytest.fixture
def accounts(client: FlatFileClient) -> AccountRegistry:
    return AccountRegistry(client)


@pytest.fixture
def tags(client: FlatFileClient) -> TagRegistry:
    registry = TagRegistry(client)
    for name in ("food", "rent", "salary"):
        registry.create(name)
    return registry


@pytest.fixture
def table(client: FlatFileClient, tags: TagRegistry) -> FlatFileLedgerTable:
    return FlatFileLedgerTable.select(
        client, tags, "main", "2024_03", create_if_missing=True
    )
