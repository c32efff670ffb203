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
"""Key-value store protocols."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from fedstore.store.record import LookupResult


@runtime_checkable
class KeyValueStore(Protocol):
    """Typed, TTL-bearing key-value persistence.

    ``type_`` selects a logical partition (a collection for MongoDB) and
    ``key`` identifies the record within it. ``expire`` is a unix timestamp;
    ``None`` means the record never expires.
    """

    def get(self, type_: str, key: str) -> Any | None: ...

    def lookup(self, type_: str, key: str) -> LookupResult | None: ...

    def set(self, type_: str, key: str, value: Any, expire: int | None = None) -> None: ...

    def delete(self, type_: str, key: str) -> None: ...

    def close(self) -> None: ...


@runtime_checkable
class AsyncKeyValueStore(Protocol):
    """Coroutine counterpart of :class:`KeyValueStore`."""

    async def get(self, type_: str, key: str) -> Any | None: ...

    async def lookup(self, type_: str, key: str) -> LookupResult | None: ...

    async def set(self, type_: str, key: str, value: Any, expire: int | None = None) -> None: ...

    async def delete(self, type_: str, key: str) -> None: ...

    def close(self) -> None: ...
