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
"""fedstore store — typed, TTL-bearing key-value persistence.

Import concrete store types from the adapter package::

    from fedstore.store.adapters.mongodb import MongoStore
    from fedstore.store.adapters.async_mongodb import AsyncMongoStore
    from fedstore.store.adapters.memory import InMemoryStore
"""

from fedstore.store.connection import build_connection_uri, client_options, mask_uri
from fedstore.store.factory import create_async_store, create_store
from fedstore.store.ports.outbound import AsyncKeyValueStore, KeyValueStore
from fedstore.store.record import LegacyRecord, LookupResult, StoredValue

__all__ = [
    "AsyncKeyValueStore",
    "KeyValueStore",
    "LegacyRecord",
    "LookupResult",
    "StoredValue",
    "build_connection_uri",
    "client_options",
    "create_async_store",
    "create_store",
    "mask_uri",
]
