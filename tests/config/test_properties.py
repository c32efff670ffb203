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
"""Tests for @config_properties binding of the store subsystems."""

import pytest

from fedstore.config.properties import MongoDBProperties, StoreProperties
from fedstore.core.config import Config
from fedstore.kernel.exceptions import ConfigurationException


class TestMongoDBProperties:
    def test_bind_defaults(self):
        props = Config({"fedstore": {"mongodb": {}}}).bind(MongoDBProperties)
        assert props.host is None
        assert props.port == 27017
        assert props.database is None
        assert props.replica_set is None
        assert props.is_replica_connection_string is False
        assert props.escape_credentials is False

    def test_bind_packaged_defaults(self):
        props = Config.defaults().bind(MongoDBProperties)
        assert props.host == "localhost"
        assert props.database == "fedstore"

    def test_bind_replica_set(self):
        config = Config(
            {
                "fedstore": {
                    "mongodb": {
                        "host": ["db1", "db2"],
                        "port": 27018,
                        "database": "saml",
                        "replica_set": "rs0",
                        "read_preference": "secondaryPreferred",
                    }
                }
            }
        )
        props = config.bind(MongoDBProperties)
        assert props.host == ["db1", "db2"]
        assert props.port == 27018
        assert props.replica_set == "rs0"
        assert props.read_preference == "secondaryPreferred"

    def test_bind_from_environment(self, monkeypatch):
        monkeypatch.setenv("FEDSTORE_MONGODB_PORT", "27019")
        monkeypatch.setenv("FEDSTORE_MONGODB_IS_REPLICA_CONNECTION_STRING", "1")
        monkeypatch.setenv("FEDSTORE_MONGODB_DSN", "mongodb://a,b/?replicaSet=rs0")
        props = Config({}).bind(MongoDBProperties)
        assert props.port == 27019
        assert props.is_replica_connection_string is True
        assert props.dsn == "mongodb://a,b/?replicaSet=rs0"

    def test_password_hidden_from_repr(self):
        props = MongoDBProperties(username="u", password="hunter2", dsn="mongodb://u:hunter2@h")
        assert "hunter2" not in repr(props)
        assert "username='u'" in repr(props)

    def test_from_mapping_accepts_camel_case(self):
        props = MongoDBProperties.from_mapping(
            {"replicaSet": "rs0", "readPreference": "nearest", "isReplicaConnectionString": True, "dsn": "x"}
        )
        assert props.replica_set == "rs0"
        assert props.read_preference == "nearest"
        assert props.is_replica_connection_string is True

    def test_with_overrides_returns_copy(self):
        base = MongoDBProperties(host="a")
        merged = base.with_overrides({"host": "b", "escapeCredentials": True})
        assert base.host == "a"
        assert merged.host == "b"
        assert merged.escape_credentials is True

    def test_with_no_overrides(self):
        base = MongoDBProperties(host="a")
        merged = base.with_overrides(None)
        assert merged == base
        assert merged is not base

    def test_overrides_coerce_flag_strings(self):
        props = MongoDBProperties.from_mapping({"isReplicaConnectionString": "false", "escapeCredentials": "TRUE"})
        assert props.is_replica_connection_string is False
        assert props.escape_credentials is True

    def test_overrides_coerce_port_string(self):
        assert MongoDBProperties.from_mapping({"port": "27018"}).port == 27018

    def test_invalid_port_string(self):
        with pytest.raises(ConfigurationException) as exc_info:
            MongoDBProperties.from_mapping({"port": "mongo"})
        assert exc_info.value.context == {"setting": "port"}

    def test_lenient_mapping_skips_unknown_keys(self):
        props = MongoDBProperties.from_mapping({"host": "h", "options": {"tls": True}}, strict=False)
        assert props.host == "h"

    def test_unknown_key(self):
        with pytest.raises(ConfigurationException) as exc_info:
            MongoDBProperties.from_mapping({"hots": "typo"})
        assert exc_info.value.context == {"setting": "hots"}


class TestStoreProperties:
    def test_bind_defaults(self):
        props = Config({}).bind(StoreProperties)
        assert props.type == "mongodb"
        assert props.codec == "pickle"
        assert props.on_decode_error == "raise"

    def test_bind_custom(self):
        config = Config({"fedstore": {"store": {"type": "memory", "codec": "json", "on_decode_error": "discard"}}})
        props = config.bind(StoreProperties)
        assert props.type == "memory"
        assert props.codec == "json"
        assert props.on_decode_error == "discard"

    def test_rejects_unknown_codec(self):
        with pytest.raises(ConfigurationException):
            Config({"fedstore": {"store": {"codec": "msgpack"}}}).bind(StoreProperties)
