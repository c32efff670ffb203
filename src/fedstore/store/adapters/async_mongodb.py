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
"""MongoDB-backed key-value store for asyncio hosts (Motor)."""

from __future__ import annotations

from typing import Any

from motor.motor_asyncio import AsyncIOMotorClient

from fedstore.store.adapters.mongodb import MongoStoreSupport
from fedstore.store.record import SESSION_ID, LookupResult, unwrap


class AsyncMongoStore(MongoStoreSupport):
    """Coroutine variant of :class:`~fedstore.store.adapters.mongodb.MongoStore`.

    Same record layout, namespaces and lazy expiration; every operation is
    awaited on an ``AsyncIOMotorClient``.
    """

    default_client_factory = AsyncIOMotorClient

    async def lookup(self, type_: str, key: str) -> LookupResult | None:
        """Return the tagged record for *key*, or ``None`` if absent or expired."""
        document = await self._collection(type_).find_one({SESSION_ID: key})
        if document is None:
            return None
        if self._expired(document, type_, key):
            await self.delete(type_, key)
            return None
        return self._read(document, type_)

    async def get(self, type_: str, key: str) -> Any | None:
        return unwrap(await self.lookup(type_, key))

    async def set(self, type_: str, key: str, value: Any, expire: int | None = None) -> None:
        await self._collection(type_).replace_one(
            {SESSION_ID: key},
            self._document(key, value, expire),
            upsert=True,
        )

    async def delete(self, type_: str, key: str) -> None:
        await self._collection(type_).delete_many({SESSION_ID: key})
