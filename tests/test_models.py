"""Tests for cloudsync models."""
from pathlib import Path

import pytest

from cloudsync.exceptions import ConfigurationError
from cloudsync.models import (
    DESCRIPTOR_FILENAME,
    Descriptor,
    SyncConfig,
    SyncResult,
    UploadResult,
    UploadStatus,
    join_key,
)


class TestDescriptor:
    def test_from_settings_reads_all_fields(self):
        descriptor = Descriptor.from_settings(Path("/proj"), {"container": "c", "directory": "d", "public": True})

        assert descriptor.root == Path("/proj")
        assert descriptor.container == "c"
        assert descriptor.prefix == "d"
        assert descriptor.public is True
        assert descriptor.config_path() == f"/proj/{DESCRIPTOR_FILENAME}"

    def test_from_settings_defaults(self):
        descriptor = Descriptor.from_settings(Path("/proj"), {"container": "c"})

        assert descriptor.prefix == ""
        assert descriptor.public is False

    def test_unknown_keys_ignored(self):
        descriptor = Descriptor.from_settings(Path("/proj"), {"container": "c", "cdn_ttl": 900})
        assert descriptor.container == "c"

    @pytest.mark.parametrize("settings", [{}, {"container": ""}, {"container": None}, {"directory": "d"}])
    def test_missing_container(self, settings):
        with pytest.raises(ConfigurationError, match="missing container") as exc_info:
            Descriptor.from_settings(Path("/proj"), settings)
        assert exc_info.value.path == Path("/proj") / DESCRIPTOR_FILENAME

    @pytest.mark.parametrize(
        "settings, message",
        [
            ({"container": 5}, "container must be a string"),
            ({"container": "c", "directory": 3}, "directory must be a string"),
            ({"container": "c", "public": "yes"}, "public must be a boolean"),
        ],
    )
    def test_wrong_types(self, settings, message):
        with pytest.raises(ConfigurationError, match=message):
            Descriptor.from_settings(Path("/proj"), settings)

    def test_settings_must_be_object(self):
        with pytest.raises(ConfigurationError, match="must be an object"):
            Descriptor.from_settings(Path("/proj"), ["container"])

    def test_descriptor_is_immutable(self):
        descriptor = Descriptor.from_settings(Path("/proj"), {"container": "c"})
        with pytest.raises(AttributeError):
            descriptor.container = "other"


def test_join_key():
    assert join_key("", "a.txt") == "a.txt"
    assert join_key("assets", "a.txt") == "assets/a.txt"
    assert join_key("assets/", "sub/b.txt") == "assets/sub/b.txt"


class TestSyncConfig:
    def test_defaults_from_empty_env(self, monkeypatch):
        for name in ("CLOUDSYNC_MAX_PARALLEL", "CLOUDSYNC_MAX_WALK_PARALLEL", "CLOUDSYNC_TIMEOUT", "CLOUDSYNC_MAX_RETRIES"):
            monkeypatch.delenv(name, raising=False)
        assert SyncConfig.from_env() == SyncConfig()

    def test_reads_env(self, monkeypatch):
        monkeypatch.setenv("CLOUDSYNC_MAX_PARALLEL", "16")
        monkeypatch.setenv("CLOUDSYNC_TIMEOUT", "5")
        config = SyncConfig.from_env()
        assert config.max_parallel == 16
        assert config.request_timeout == 5

    @pytest.mark.parametrize("value", ["many", "0"])
    def test_invalid_env(self, monkeypatch, value):
        monkeypatch.setenv("CLOUDSYNC_MAX_PARALLEL", value)
        with pytest.raises(ConfigurationError, match="CLOUDSYNC_MAX_PARALLEL"):
            SyncConfig.from_env()


def test_sync_result_counts():
    descriptor = Descriptor(root=Path("/proj"), container="c")
    result = SyncResult(
        descriptor=descriptor,
        results=[
            UploadResult.ok(Path("/proj/a.txt"), "a.txt"),
            UploadResult.fail(Path("/proj/b.txt"), "b.txt", RuntimeError("x")),
        ],
    )

    assert result.uploaded == 1
    assert result.failed == 1
    assert result.all_success is False
    assert result.results[1].status == UploadStatus.FAILED


def test_relative_root_made_absolute(tmp_path, monkeypatch):
    tmp_path = tmp_path.resolve()
    monkeypatch.chdir(tmp_path)

    descriptor = Descriptor.from_settings(Path("site"), {"container": "c"})

    assert descriptor.root == tmp_path / "site"
    assert descriptor.config_path() == str(tmp_path / "site" / DESCRIPTOR_FILENAME)
