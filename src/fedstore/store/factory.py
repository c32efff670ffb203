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
"""Build the configured store from a :class:`Config`."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from fedstore.config.properties.store import StoreProperties
from fedstore.core.config import Config
from fedstore.kernel.exceptions import ConfigurationException
from fedstore.store.adapters.memory import InMemoryStore
from fedstore.store.adapters.mongodb import MongoStore
from fedstore.store.ports.outbound import AsyncKeyValueStore, KeyValueStore

_logger = logging.getLogger(__name__)


def create_store(config: Config, client_factory: Callable[..., Any] | None = None) -> KeyValueStore:
    """Create a synchronous store according to ``fedstore.store.type``.

    ``mongodb`` binds connection settings from ``fedstore.mongodb``;
    ``memory`` needs no connection at all.
    """
    props = config.bind(StoreProperties)
    _logger.debug("Creating %s store (codec=%s, on_decode_error=%s)", props.type, props.codec, props.on_decode_error)

    if props.type == "memory":
        return InMemoryStore(codec=props.codec, on_decode_error=props.on_decode_error)

    return MongoStore(
        config,
        codec=props.codec,
        on_decode_error=props.on_decode_error,
        client_factory=client_factory,
    )


def create_async_store(config: Config, client_factory: Callable[..., Any] | None = None) -> AsyncKeyValueStore:
    """Create a Motor-backed store from ``fedstore.mongodb``.

    Only ``fedstore.store.type: mongodb`` has an asynchronous adapter; any
    other type raises :class:`ConfigurationException`.
    """
    from fedstore.store.adapters.async_mongodb import AsyncMongoStore

    props = config.bind(StoreProperties)
    if props.type != "mongodb":
        raise ConfigurationException(
            f"No asynchronous store for fedstore.store.type '{props.type}'; use create_store()",
            code="STORE_CONFIG",
            context={"type": props.type},
        )
    return AsyncMongoStore(
        config,
        codec=props.codec,
        on_decode_error=props.on_decode_error,
        client_factory=client_factory,
    )
