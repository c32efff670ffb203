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
"""Exception hierarchy for fedstore.

All library exceptions inherit from FedStoreException, so callers can catch
one type for every store failure or a subclass for targeted handling.

Categories:
- InfrastructureException: configuration and connection failures
- DataIntegrityException: stored data that cannot be read back

Errors raised by the MongoDB driver during get/set/delete are not wrapped.
"""

from __future__ import annotations


# =============================================================================
# Base Exception
# =============================================================================


class FedStoreException(Exception):
    """Base exception for all fedstore errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "STORE_CONFIG").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Infrastructure Exceptions
# =============================================================================


class InfrastructureException(FedStoreException):
    """Configuration, connection and driver-level failures."""


class ConfigurationException(InfrastructureException):
    """Required configuration is missing or invalid."""


class StoreConnectionException(InfrastructureException):
    """The database client could not be constructed."""


# =============================================================================
# Data Exceptions
# =============================================================================


class DataIntegrityException(FedStoreException):
    """Stored data is malformed or inconsistent."""


class PayloadDecodeException(DataIntegrityException):
    """A stored payload could not be deserialized."""
