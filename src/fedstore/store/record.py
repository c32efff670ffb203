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
"""Stored record shape and the tagged results returned by lookups.

A record is stored as ``{session_id, payload, expire_at}``. Reading one back
yields either a :class:`StoredValue` (the decoded payload) or a
:class:`LegacyRecord` (a document written without a payload, returned as its
raw fields).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Literal

from fedstore.kernel.exceptions import PayloadDecodeException
from fedstore.store.codec import PayloadCodec

_logger = logging.getLogger(__name__)

SESSION_ID = "session_id"
PAYLOAD = "payload"
EXPIRE_AT = "expire_at"

DecodeErrorPolicy = Literal["raise", "discard"]


@dataclass(frozen=True)
class StoredValue:
    """A record whose payload was decoded into the caller's value."""

    value: Any


@dataclass(frozen=True)
class LegacyRecord:
    """A record without a payload; ``fields`` is the stored document as-is."""

    fields: dict[str, Any]


LookupResult = StoredValue | LegacyRecord


def build_document(key: str, payload: bytes, expire: int | None) -> dict[str, Any]:
    """Build the full replacement document for *key*."""
    return {SESSION_ID: key, PAYLOAD: payload, EXPIRE_AT: expire}


def is_expired(document: dict[str, Any], now: float) -> bool:
    """Return ``True`` if the document carries an ``expire_at`` at or before *now*."""
    expire_at = document.get(EXPIRE_AT)
    return expire_at is not None and expire_at <= now


def read_document(
    document: dict[str, Any],
    codec: PayloadCodec,
    on_decode_error: DecodeErrorPolicy = "raise",
    namespace: str = "",
) -> LookupResult | None:
    """Turn a live (non-expired) document into a tagged lookup result.

    Returns ``None`` only when the payload cannot be decoded and the policy
    is ``discard``.
    """
    payload = document.get(PAYLOAD)
    if not payload:
        return LegacyRecord(dict(document))

    try:
        return StoredValue(codec.decode(payload))
    except PayloadDecodeException:
        if on_decode_error != "discard":
            raise
        _logger.warning(
            "Discarding undecodable payload for '%s' in %s (codec=%s)",
            document.get(SESSION_ID),
            namespace,
            codec.name,
        )
        return None


def unwrap(result: LookupResult | None) -> Any:
    """Collapse a tagged result into the plain value returned by ``get``."""
    if result is None:
        return None
    if isinstance(result, LegacyRecord):
        return result.fields
    return result.value
