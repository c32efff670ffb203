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
"""MongoDB-backed key-value store (synchronous, pymongo)."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping
from typing import Any, ClassVar

from pymongo import MongoClient

from fedstore.config.properties.mongodb import MongoDBProperties
from fedstore.core.config import Config
from fedstore.kernel.exceptions import ConfigurationException
from fedstore.store.codec import PayloadCodec, codec_for
from fedstore.store.connection import create_client
from fedstore.store.record import (
    EXPIRE_AT,
    SESSION_ID,
    DecodeErrorPolicy,
    LookupResult,
    build_document,
    is_expired,
    read_document,
    unwrap,
)

_logger = logging.getLogger(__name__)

ConfigSource = MongoDBProperties | Mapping[str, Any] | Config | None


def resolve_properties(config: ConfigSource, overrides: Mapping[str, Any] | None = None) -> MongoDBProperties:
    """Merge *overrides* onto *config*, whatever form the base config takes.

    ``None`` binds the packaged library defaults (and ``FEDSTORE_MONGODB_*``
    environment overrides); a mapping starts from empty properties.
    """
    if config is None:
        base = Config.defaults().bind(MongoDBProperties)
    elif isinstance(config, MongoDBProperties):
        base = config
    elif isinstance(config, Config):
        base = config.bind(MongoDBProperties)
    else:
        base = MongoDBProperties.from_mapping(config)
    return base.with_overrides(overrides)


class MongoStoreSupport:
    """Construction and record handling shared by the sync and async stores.

    The client is built once from the merged configuration and owned by the
    store for its lifetime. Records of type ``T`` live in the collection
    ``<database>.T``.
    """

    default_client_factory: ClassVar[Callable[..., Any]]

    def __init__(
        self,
        config: ConfigSource = None,
        overrides: Mapping[str, Any] | None = None,
        *,
        codec: PayloadCodec | str = "pickle",
        on_decode_error: DecodeErrorPolicy = "raise",
        client_factory: Callable[..., Any] | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if on_decode_error not in ("raise", "discard"):
            raise ConfigurationException(
                f"on_decode_error must be 'raise' or 'discard', got '{on_decode_error}'",
                code="STORE_CONFIG",
            )

        props = resolve_properties(config, overrides)
        self._codec = codec_for(codec) if isinstance(codec, str) else codec
        self._on_decode_error = on_decode_error
        self._clock = clock
        self._client = create_client(props, client_factory or self.default_client_factory)
        self._database: str = str(props.database)

    def get_connection(self) -> Any:
        """Return the underlying client handle."""
        return self._client

    def get_database_name(self) -> str:
        return self._database

    def namespace(self, type_: str) -> str:
        """Return the ``database.collection`` namespace for *type_*."""
        return f"{self._database}.{type_}"

    def close(self) -> None:
        """Close the underlying client."""
        self._client.close()

    def _collection(self, type_: str) -> Any:
        return self._client[self._database][type_]

    def _expired(self, document: dict[str, Any], type_: str, key: str) -> bool:
        if not is_expired(document, self._clock()):
            return False
        _logger.debug(
            "Record '%s' in %s expired at %s; deleting",
            key,
            self.namespace(type_),
            document.get(EXPIRE_AT),
        )
        return True

    def _read(self, document: dict[str, Any], type_: str) -> LookupResult | None:
        return read_document(document, self._codec, self._on_decode_error, self.namespace(type_))

    def _document(self, key: str, value: Any, expire: int | None) -> dict[str, Any]:
        return build_document(key, self._codec.encode(value), expire)


class MongoStore(MongoStoreSupport):
    """Key-value store backed by a synchronous ``pymongo.MongoClient``.

    Expiration is enforced lazily: an expired record is deleted when it is
    read, never in the background.

    Usage::

        store = MongoStore({"host": "db1,db2", "port": 27017, "database": "saml"})
        store.set("session", session_id, data, expire=int(time.time()) + 3600)
        data = store.get("session", session_id)
    """

    default_client_factory = MongoClient

    def lookup(self, type_: str, key: str) -> LookupResult | None:
        """Return the tagged record for *key*, or ``None`` if absent or expired."""
        document = self._collection(type_).find_one({SESSION_ID: key})
        if document is None:
            return None
        if self._expired(document, type_, key):
            self.delete(type_, key)
            return None
        return self._read(document, type_)

    def get(self, type_: str, key: str) -> Any | None:
        """Return the stored value, the raw document for payload-less records, or ``None``."""
        return unwrap(self.lookup(type_, key))

    def set(self, type_: str, key: str, value: Any, expire: int | None = None) -> None:
        """Store *value* under *key*, replacing any existing record."""
        self._collection(type_).replace_one({SESSION_ID: key}, self._document(key, value, expire), upsert=True)

    def delete(self, type_: str, key: str) -> None:
        """Remove the record for *key*; absent keys are ignored."""
        self._collection(type_).delete_many({SESSION_ID: key})
