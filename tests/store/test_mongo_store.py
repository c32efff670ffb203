# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Tests for MongoStore — integration tests using mongomock."""

from __future__ import annotations

import logging
import time
from typing import Any

import mongomock
import pytest

from fedstore.config.properties.mongodb import MongoDBProperties
from fedstore.core.config import Config
from fedstore.kernel.exceptions import ConfigurationException, PayloadDecodeException
from fedstore.store.adapters.mongodb import MongoStore, resolve_properties
from fedstore.store.ports.outbound import KeyValueStore
from fedstore.store.record import LegacyRecord, StoredValue

TYPE = "session"
KEY = "SESSION_ID"


@pytest.fixture
def store() -> MongoStore:
    return MongoStore(
        {"host": "localhost", "port": 27017, "database": "testdb"},
        client_factory=mongomock.MongoClient,
    )


def session_count(store: MongoStore, type_: str = TYPE) -> int:
    return store.get_connection()[store.get_database_name()][type_].count_documents({})


def in_the_future() -> int:
    return int(time.time()) + 1_000_000


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


class TestConstruction:
    def test_implements_port(self, store):
        assert isinstance(store, KeyValueStore)

    def test_accessors(self, store):
        assert isinstance(store.get_connection(), mongomock.MongoClient)
        assert store.get_database_name() == "testdb"
        assert store.namespace("session") == "testdb.session"

    def test_overrides_win(self):
        calls: list[tuple[str, dict[str, Any]]] = []

        def factory(uri: str, **options: Any) -> mongomock.MongoClient:
            calls.append((uri, options))
            return mongomock.MongoClient(uri)

        store = MongoStore(
            MongoDBProperties(host="base", port=27017, database="base_db"),
            {"host": "db1,db2", "database": "override_db", "replicaSet": "rs0", "readPreference": "secondary"},
            client_factory=factory,
        )
        assert calls == [
            ("mongodb://db1:27017,db2:27017", {"replicaSet": "rs0", "readPreference": "secondary"}),
        ]
        assert store.get_database_name() == "override_db"

    def test_read_preference_ignored_without_replica_set(self):
        calls: list[dict[str, Any]] = []

        def factory(uri: str, **options: Any) -> mongomock.MongoClient:
            calls.append(options)
            return mongomock.MongoClient(uri)

        MongoStore({"host": "h", "database": "testdb", "readPreference": "secondary"}, client_factory=factory)
        assert calls == [{}]

    def test_from_config(self):
        config = Config({"fedstore": {"mongodb": {"host": "cfg-host", "port": "27019", "database": "cfg_db"}}})
        store = MongoStore(config, client_factory=mongomock.MongoClient)
        assert store.get_database_name() == "cfg_db"

    def test_defaults_when_no_config(self):
        store = MongoStore(client_factory=mongomock.MongoClient)
        assert store.get_database_name() == "fedstore"

    def test_mapping_without_host_raises(self):
        with pytest.raises(ConfigurationException, match="host") as exc_info:
            MongoStore({"port": 27017, "database": "x"}, client_factory=mongomock.MongoClient)
        assert exc_info.value.context == {"field": "host"}

    def test_mapping_without_database_raises(self):
        with pytest.raises(ConfigurationException, match="database"):
            MongoStore({"host": "h", "port": 27017}, client_factory=mongomock.MongoClient)

    def test_string_false_flag_keeps_host_mode(self):
        calls: list[str] = []

        def factory(uri: str, **options: Any) -> mongomock.MongoClient:
            calls.append(uri)
            return mongomock.MongoClient(uri)

        MongoStore(
            {"host": "h", "database": "x", "isReplicaConnectionString": "false", "dsn": "mongodb://custom"},
            client_factory=factory,
        )
        assert calls == ["mongodb://h:27017"]

    def test_missing_dsn_raises(self):
        with pytest.raises(ConfigurationException, match="dsn"):
            MongoStore({"isReplicaConnectionString": True, "database": "x"}, client_factory=mongomock.MongoClient)

    def test_unknown_override_raises(self):
        with pytest.raises(ConfigurationException, match="hostname"):
            MongoStore({}, {"hostname": "x"}, client_factory=mongomock.MongoClient)

    def test_unknown_codec_raises(self):
        with pytest.raises(ConfigurationException, match="codec"):
            MongoStore(codec="xml", client_factory=mongomock.MongoClient)

    def test_invalid_decode_policy_raises(self):
        with pytest.raises(ConfigurationException):
            MongoStore(on_decode_error="ignore", client_factory=mongomock.MongoClient)  # type: ignore[arg-type]

    def test_resolve_properties_accepts_kebab_case(self):
        props = resolve_properties({"replica-set": "rs1", "read-preference": "nearest"})
        assert props.replica_set == "rs1"
        assert props.read_preference == "nearest"


# ---------------------------------------------------------------------------
# get / set / delete
# ---------------------------------------------------------------------------


class TestGet:
    def test_absent_key_returns_none(self, store):
        assert store.get(TYPE, KEY) is None
        assert store.lookup(TYPE, KEY) is None

    def test_round_trip(self, store):
        value = {"some": "thing"}
        store.set(TYPE, KEY, value, in_the_future())

        assert session_count(store) == 1
        assert store.get(TYPE, KEY) == value
        assert session_count(store) == 1

    def test_lookup_returns_tagged_value(self, store):
        store.set(TYPE, KEY, ["a", 1])
        assert store.lookup(TYPE, KEY) == StoredValue(["a", 1])

    def test_expired_record_is_deleted_on_read(self, store):
        store.set(TYPE, KEY, {"some": "thing"}, 0)
        assert session_count(store) == 1

        assert store.get(TYPE, KEY) is None
        assert session_count(store) == 0

    def test_expire_at_now_counts_as_expired(self):
        store = MongoStore(client_factory=mongomock.MongoClient, clock=lambda: 1000.0)
        store.set(TYPE, KEY, "v", 1000)
        assert store.get(TYPE, KEY) is None

    def test_expire_just_after_now_is_live(self):
        store = MongoStore(client_factory=mongomock.MongoClient, clock=lambda: 1000.0)
        store.set(TYPE, KEY, "v", 1001)
        assert store.get(TYPE, KEY) == "v"

    def test_no_expiry(self, store):
        store.set(TYPE, KEY, "forever")
        document = store.get_connection()["testdb"][TYPE].find_one({"session_id": KEY})
        assert document["expire_at"] is None
        assert store.get(TYPE, KEY) == "forever"

    def test_legacy_record_without_payload_returns_raw_fields(self, store):
        collection = store.get_connection()["testdb"][TYPE]
        collection.insert_one({"session_id": KEY, "user": "alice"})

        result = store.get(TYPE, KEY)
        assert result["session_id"] == KEY
        assert result["user"] == "alice"
        assert isinstance(store.lookup(TYPE, KEY), LegacyRecord)

    def test_empty_payload_is_legacy(self, store):
        store.get_connection()["testdb"][TYPE].insert_one({"session_id": KEY, "payload": b"", "expire_at": None})
        assert isinstance(store.lookup(TYPE, KEY), LegacyRecord)

    def test_expired_legacy_record_is_deleted(self, store):
        store.get_connection()["testdb"][TYPE].insert_one({"session_id": KEY, "expire_at": 5})
        assert store.get(TYPE, KEY) is None
        assert session_count(store) == 0

    def test_types_are_separate_collections(self, store):
        store.set("session", KEY, "s")
        store.set("artifact", KEY, "a")
        assert store.get("session", KEY) == "s"
        assert store.get("artifact", KEY) == "a"
        assert session_count(store, "artifact") == 1


class TestDecodeErrors:
    def _corrupt(self, store: MongoStore) -> None:
        store.get_connection()["testdb"][TYPE].insert_one(
            {"session_id": KEY, "payload": b"not a pickle", "expire_at": None}
        )

    def test_raise_policy(self, store):
        self._corrupt(store)
        with pytest.raises(PayloadDecodeException):
            store.get(TYPE, KEY)

    def test_discard_policy(self, caplog):
        store = MongoStore(
            {"host": "localhost", "database": "testdb"},
            on_decode_error="discard",
            client_factory=mongomock.MongoClient,
        )
        self._corrupt(store)
        with caplog.at_level(logging.WARNING, logger="fedstore.store.record"):
            assert store.get(TYPE, KEY) is None
        assert session_count(store) == 1
        assert "Discarding undecodable payload" in caplog.text


class TestSet:
    def test_second_set_replaces(self, store):
        expire = in_the_future()
        store.set(TYPE, KEY, {"some": "thing"}, expire)
        store.set(TYPE, KEY, {"some": "otherthing"}, expire)

        assert session_count(store) == 1
        assert store.get(TYPE, KEY) == {"some": "otherthing"}

    def test_set_fully_replaces_document(self, store):
        collection = store.get_connection()["testdb"][TYPE]
        collection.insert_one({"session_id": KEY, "extra": "legacy-field"})

        store.set(TYPE, KEY, "value")

        document = collection.find_one({"session_id": KEY})
        assert "extra" not in document
        assert set(document) == {"_id", "session_id", "payload", "expire_at"}

    def test_set_clears_previous_expiry(self, store):
        store.set(TYPE, KEY, "v", 0)
        store.set(TYPE, KEY, "v")
        assert store.get(TYPE, KEY) == "v"

    def test_json_codec(self):
        store = MongoStore(
            {"host": "localhost", "database": "testdb"},
            codec="json",
            client_factory=mongomock.MongoClient,
        )
        store.set(TYPE, KEY, {"user": "alice", "roles": ["admin"]})
        document = store.get_connection()["testdb"][TYPE].find_one({"session_id": KEY})
        assert document["payload"] == b'{"user":"alice","roles":["admin"]}'
        assert store.get(TYPE, KEY) == {"user": "alice", "roles": ["admin"]}


class TestDelete:
    def test_delete(self, store):
        store.set(TYPE, KEY, {"some": "thing"}, in_the_future())
        assert session_count(store) == 1

        store.delete(TYPE, KEY)
        assert session_count(store) == 0
        assert store.get(TYPE, KEY) is None

    def test_delete_absent_key_is_noop(self, store):
        store.delete(TYPE, "missing")
        assert session_count(store) == 0

    def test_delete_only_touches_matching_key(self, store):
        store.set(TYPE, "a", 1)
        store.set(TYPE, "b", 2)
        store.delete(TYPE, "a")
        assert store.get(TYPE, "b") == 2
        assert session_count(store) == 1
