# ==============================================================================
# Tests for Storage Adapters
# ==============================================================================
"""
Tests for MemoryStorage, FileStorage, ValkeyStorage and the get_storage()
factory. ValkeyStorage runs against fakeredis.
"""

from unittest.mock import MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from pagepulse.core.visitor import VisitorIdentity
from pagepulse.exceptions import StorageError
from pagepulse.infrastructure.storage import (
    FileStorage,
    MemoryStorage,
    ValkeyStorage,
    get_storage,
)
from pagepulse.utils.config import Settings, StorageSettings


class TestMemoryStorage:
    def test_round_trip(self):
        storage = MemoryStorage()
        assert storage.get("k") is None
        storage.set("k", "v")
        assert storage.get("k") == "v"
        assert storage.delete("k") is True
        assert storage.delete("k") is False


class TestFileStorage:
    def test_missing_file_is_empty(self, tmp_path):
        assert FileStorage(tmp_path / "none.json").get("k") is None

    def test_persists_across_instances(self, tmp_path):
        path = tmp_path / "nested" / "storage.json"
        FileStorage(path).set("visitorId", "visitor-abcdefghi")
        assert FileStorage(path).get("visitorId") == "visitor-abcdefghi"
        assert not path.with_name("storage.json.tmp").exists()

    def test_keeps_other_keys(self, tmp_path):
        storage = FileStorage(tmp_path / "s.json")
        storage.set("a", "1")
        storage.set("b", "2")
        assert storage.delete("a") is True
        assert storage.get("b") == "2"
        assert storage.delete("a") is False

    @pytest.mark.parametrize("content", ["not json", "[1, 2]", '{"k": 5}'])
    def test_unusable_content_reads_as_empty(self, tmp_path, content):
        path = tmp_path / "s.json"
        path.write_text(content)
        assert FileStorage(path).get("k") is None

    def test_unreadable_path_raises(self, tmp_path):
        # A directory where the file should be
        path = tmp_path / "dir"
        path.mkdir()
        with pytest.raises(StorageError):
            FileStorage(path).get("k")


class TestValkeyStorage:
    def test_round_trip(self, valkey_storage, fake_redis):
        valkey_storage.set("visitorId", "visitor-abcdefghi")
        assert fake_redis.get("pagepulse:visitorId") == "visitor-abcdefghi"
        assert valkey_storage.get("visitorId") == "visitor-abcdefghi"
        assert valkey_storage.delete("visitorId") is True
        assert valkey_storage.get("visitorId") is None

    def test_ping(self, valkey_storage):
        assert valkey_storage.ping() is True

    def test_connection_errors_become_storage_errors(self, valkey_storage):
        valkey_storage._client = MagicMock()
        valkey_storage._client.get.side_effect = RedisConnectionError("refused")
        valkey_storage._client.ping.side_effect = RedisConnectionError("refused")

        with pytest.raises(StorageError, match="Valkey get failed"):
            valkey_storage.get("visitorId")
        assert valkey_storage.ping() is False

    def test_visitor_identity_degrades(self, valkey_storage):
        valkey_storage._client = MagicMock()
        valkey_storage._client.get.side_effect = RedisConnectionError("refused")

        identity = VisitorIdentity(valkey_storage)
        assert identity.get_or_create() != identity.get_or_create()


class TestGetStorage:
    def test_memory(self):
        settings = Settings(storage=StorageSettings(backend="memory"))
        assert isinstance(get_storage(settings), MemoryStorage)

    def test_file(self, tmp_path):
        settings = Settings(storage=StorageSettings(backend="file", path=tmp_path / "s.json"))
        storage = get_storage(settings)
        assert isinstance(storage, FileStorage)
        assert storage.path == tmp_path / "s.json"

    def test_valkey(self):
        settings = Settings(storage=StorageSettings(backend="valkey", key_prefix="site:"))
        storage = get_storage(settings)
        assert isinstance(storage, ValkeyStorage)
        assert storage._prefix == "site:"
