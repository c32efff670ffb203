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
"""MongoDB connection URI construction and client creation."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping
from typing import Any
from urllib.parse import quote_plus

from pymongo.errors import PyMongoError

from fedstore.config.properties.mongodb import MongoDBProperties
from fedstore.kernel.exceptions import ConfigurationException, StoreConnectionException

_logger = logging.getLogger(__name__)

_SCHEME = "mongodb://"

# Characters the driver refuses in unescaped userinfo.
_RESERVED_USERINFO = frozenset(":/?#[]@%")

_USERINFO_RE = re.compile(r"^(?P<scheme>[a-z+]+://)(?P<user>[^:@/?]*):(?P<password>[^/?]*)@")


def _as_properties(config: MongoDBProperties | Mapping[str, Any]) -> MongoDBProperties:
    if isinstance(config, MongoDBProperties):
        return config
    return MongoDBProperties.from_mapping(config, strict=False)


def _missing(value: Any) -> bool:
    return value is None or value == "" or value == []


def _dsn_mode(props: MongoDBProperties) -> bool:
    return props.is_replica_connection_string is True


def validate_properties(props: MongoDBProperties) -> None:
    """Raise :class:`ConfigurationException` if *props* cannot describe a connection."""
    if _missing(props.database):
        raise ConfigurationException(
            "MongoDB store requires a database name",
            code="STORE_CONFIG",
            context={"field": "database"},
        )

    if _dsn_mode(props):
        if _missing(props.dsn):
            raise ConfigurationException(
                "is_replica_connection_string is set but no dsn was given",
                code="STORE_CONFIG",
                context={"field": "dsn"},
            )
        return

    for name in ("host", "port"):
        if _missing(getattr(props, name)):
            raise ConfigurationException(
                f"MongoDB store requires '{name}' unless a connection string is used",
                code="STORE_CONFIG",
                context={"field": name},
            )


def _seed_list(host: str | list[str] | None, port: Any) -> str:
    if host is None:
        return ""
    hosts = host if isinstance(host, list) else str(host).split(",")
    return ",".join(f"{h}:{port}" for h in hosts)


def _userinfo(props: MongoDBProperties) -> str:
    username, password = props.username, props.password
    if not username or not password:
        return ""

    if props.escape_credentials is True:
        return f"{quote_plus(username)}:{quote_plus(password)}@"

    if _RESERVED_USERINFO.intersection(username) or _RESERVED_USERINFO.intersection(password):
        _logger.warning(
            "MongoDB credentials contain URI-reserved characters and are not escaped; "
            "set fedstore.mongodb.escape_credentials to percent-encode them"
        )
    return f"{username}:{password}@"


def build_connection_uri(config: MongoDBProperties | Mapping[str, Any]) -> str:
    """Build the connection URI for *config*.

    With ``is_replica_connection_string`` the configured ``dsn`` is returned
    untouched and nothing else is read. Otherwise the URI is
    ``mongodb://[user:pass@]h1:port,h2:port`` where every host shares the
    configured port, in the order given. Credentials are only escaped when
    ``escape_credentials`` is set.

    No validation happens here; :func:`create_client` checks the properties
    with :func:`validate_properties` first. Mapping keys that are not
    connection settings are ignored.
    """
    props = _as_properties(config)

    if _dsn_mode(props):
        return props.dsn or ""

    return _SCHEME + _userinfo(props) + _seed_list(props.host, props.port)


def client_options(config: MongoDBProperties | Mapping[str, Any]) -> dict[str, Any]:
    """Driver keyword options; read preference is only sent alongside a replica set."""
    props = _as_properties(config)
    options: dict[str, Any] = {}
    if props.replica_set:
        options["replicaSet"] = props.replica_set
        if props.read_preference:
            options["readPreference"] = props.read_preference
    return options


def mask_uri(uri: str) -> str:
    """Return *uri* with any password replaced by ``****``."""
    return _USERINFO_RE.sub(lambda m: f"{m['scheme']}{m['user']}:****@", uri, count=1)


def create_client(props: MongoDBProperties, client_factory: Callable[..., Any]) -> Any:
    """Open a client for *props* with *client_factory* (e.g. ``pymongo.MongoClient``).

    Raises :class:`ConfigurationException` when *props* lacks a required
    field. Driver errors raised while constructing the client are wrapped in
    :class:`StoreConnectionException`.
    """
    validate_properties(props)
    uri = build_connection_uri(props)
    options = client_options(props)
    try:
        client = client_factory(uri, **options)
    except PyMongoError as exc:
        raise StoreConnectionException(
            f"Cannot create MongoDB client for {mask_uri(uri)}: {exc}",
            code="STORE_CONNECTION",
            context={"uri": mask_uri(uri), "options": options},
        ) from exc

    _logger.info("Opened MongoDB client for %s (database=%s, options=%s)", mask_uri(uri), props.database, options)
    return client
