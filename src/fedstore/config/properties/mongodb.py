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
"""MongoDB connection configuration properties."""

from __future__ import annotations

import dataclasses
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from fedstore.core.config import config_properties
from fedstore.kernel.exceptions import ConfigurationException

# Names used by the federation host's module config.
_ALIASES = {
    "replicaSet": "replica_set",
    "readPreference": "read_preference",
    "isReplicaConnectionString": "is_replica_connection_string",
    "escapeCredentials": "escape_credentials",
}

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")

_BOOL_FIELDS = frozenset({"is_replica_connection_string", "escape_credentials"})


def _normalize_key(key: str) -> str:
    if key in _ALIASES:
        return _ALIASES[key]
    return _CAMEL_RE.sub("_", key).replace("-", "_").lower()


def _coerce(name: str, value: Any) -> Any:
    """Coerce string values for the flag and port fields, as ``Config.bind`` does."""
    if not isinstance(value, str):
        return value
    if name in _BOOL_FIELDS:
        return value.lower() in ("true", "1", "yes")
    if name == "port" and value:
        try:
            return int(value)
        except ValueError as exc:
            raise ConfigurationException(
                f"Invalid MongoDB port {value!r}",
                code="STORE_CONFIG",
                context={"setting": "port"},
            ) from exc
    return value


@config_properties(prefix="fedstore.mongodb")
@dataclass
class MongoDBProperties:
    """Connection settings for the MongoDB store (fedstore.mongodb.*).

    ``host`` may be a single host, a comma-separated seed list, or a list of
    hosts sharing ``port``. When ``is_replica_connection_string`` is set,
    ``dsn`` is used verbatim and the host/port/credential fields are ignored.
    ``host`` and ``database`` have no default here; the packaged
    ``fedstore-defaults.yaml`` supplies them for :class:`Config` users.
    """

    host: str | list[str] | None = None
    port: int = 27017
    username: str | None = None
    password: str | None = field(default=None, repr=False)
    database: str | None = None
    replica_set: str | None = None
    read_preference: str | None = None
    dsn: str | None = field(default=None, repr=False)
    is_replica_connection_string: bool = False
    escape_credentials: bool = False

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], *, strict: bool = True) -> MongoDBProperties:
        """Build properties from a plain mapping, accepting camelCase and kebab-case keys."""
        return cls().with_overrides(data, strict=strict)

    def with_overrides(self, overrides: Mapping[str, Any] | None, *, strict: bool = True) -> MongoDBProperties:
        """Return a copy with *overrides* applied on top; overrides win.

        Unknown keys raise :class:`ConfigurationException` unless *strict* is
        false, in which case they are skipped.
        """
        if not overrides:
            return dataclasses.replace(self)

        known = {f.name for f in dataclasses.fields(self)}
        changes: dict[str, Any] = {}
        for key, value in overrides.items():
            name = _normalize_key(str(key))
            if name not in known:
                if not strict:
                    continue
                raise ConfigurationException(
                    f"Unknown MongoDB connection setting '{key}'",
                    code="STORE_CONFIG",
                    context={"setting": key},
                )
            changes[name] = _coerce(name, value)
        return dataclasses.replace(self, **changes)
