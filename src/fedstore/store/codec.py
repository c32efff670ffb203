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
"""Payload codecs — serialize stored values to opaque bytes and back."""

from __future__ import annotations

import json
import pickle
from typing import Any, Protocol, runtime_checkable

from fedstore.kernel.exceptions import ConfigurationException, PayloadDecodeException


@runtime_checkable
class PayloadCodec(Protocol):
    """Converts caller values to the stored ``payload`` field and back."""

    name: str

    def encode(self, value: Any) -> bytes: ...

    def decode(self, payload: bytes) -> Any: ...


class PickleCodec:
    """Pickle-based codec; round-trips arbitrary Python values.

    Only read payloads written by trusted processes: unpickling runs code.
    """

    name = "pickle"

    def __init__(self, protocol: int = pickle.HIGHEST_PROTOCOL) -> None:
        self._protocol = protocol

    def encode(self, value: Any) -> bytes:
        return pickle.dumps(value, protocol=self._protocol)

    def decode(self, payload: bytes) -> Any:
        try:
            return pickle.loads(bytes(payload))
        except Exception as exc:
            raise PayloadDecodeException(
                f"Cannot unpickle payload: {exc}",
                code="PAYLOAD_DECODE",
                context={"codec": self.name},
            ) from exc


class JsonCodec:
    """JSON codec for JSON-compatible values (dicts, lists, strings, numbers)."""

    name = "json"

    def encode(self, value: Any) -> bytes:
        return json.dumps(value, separators=(",", ":")).encode("utf-8")

    def decode(self, payload: bytes | str) -> Any:
        try:
            return json.loads(payload)
        except (json.JSONDecodeError, UnicodeDecodeError, TypeError) as exc:
            raise PayloadDecodeException(
                f"Cannot parse JSON payload: {exc}",
                code="PAYLOAD_DECODE",
                context={"codec": self.name},
            ) from exc


_CODECS: dict[str, type[PickleCodec] | type[JsonCodec]] = {
    PickleCodec.name: PickleCodec,
    JsonCodec.name: JsonCodec,
}


def codec_for(name: str) -> PayloadCodec:
    """Return a codec instance for *name* (``pickle`` or ``json``)."""
    codec_cls = _CODECS.get(name)
    if codec_cls is None:
        raise ConfigurationException(
            f"Unknown payload codec '{name}'. Expected one of: {', '.join(sorted(_CODECS))}",
            code="STORE_CONFIG",
            context={"codec": name},
        )
    return codec_cls()
