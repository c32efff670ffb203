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
"""In-memory key-value store with lazy TTL expiry."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from typing import Any

from fedstore.store.codec import PayloadCodec, codec_for
from fedstore.store.record import (
    DecodeErrorPolicy,
    LookupResult,
    build_document,
    is_expired,
    read_document,
    unwrap,
)


class InMemoryStore:
    """In-memory store with the same record semantics as the MongoDB stores.

    Values are encoded with the configured codec, so a value that cannot be
    persisted to MongoDB fails here too. Suitable for development, testing,
    and single-process hosts.
    """

    def __init__(
        self,
        codec: PayloadCodec | str = "pickle",
        on_decode_error: DecodeErrorPolicy = "raise",
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._codec = codec_for(codec) if isinstance(codec, str) else codec
        self._on_decode_error = on_decode_error
        self._clock = clock
        self._namespaces: dict[str, dict[str, dict[str, Any]]] = {}
        self._lock = threading.Lock()

    def lookup(self, type_: str, key: str) -> LookupResult | None:
        """Return the tagged record for *key*, or ``None`` if absent or expired."""
        with self._lock:
            records = self._namespaces.get(type_, {})
            document = records.get(key)
            if document is None:
                return None
            if is_expired(document, self._clock()):
                del records[key]
                return None
        return read_document(document, self._codec, self._on_decode_error, type_)

    def get(self, type_: str, key: str) -> Any | None:
        return unwrap(self.lookup(type_, key))

    def set(self, type_: str, key: str, value: Any, expire: int | None = None) -> None:
        document = build_document(key, self._codec.encode(value), expire)
        with self._lock:
            self._namespaces.setdefault(type_, {})[key] = document

    def delete(self, type_: str, key: str) -> None:
        with self._lock:
            self._namespaces.get(type_, {}).pop(key, None)

    def count(self, type_: str) -> int:
        """Number of stored records of *type_*, expired ones included."""
        with self._lock:
            return len(self._namespaces.get(type_, {}))

    def close(self) -> None:
        with self._lock:
            self._namespaces.clear()
