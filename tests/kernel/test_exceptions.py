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
"""Tests for the fedstore exception hierarchy."""

from fedstore.kernel import (
    ConfigurationException,
    DataIntegrityException,
    FedStoreException,
    InfrastructureException,
    PayloadDecodeException,
    StoreConnectionException,
)


class TestFedStoreException:
    def test_basic_creation(self):
        exc = FedStoreException("something went wrong")
        assert str(exc) == "something went wrong"
        assert exc.code is None
        assert exc.context == {}

    def test_with_code_and_context(self):
        exc = FedStoreException("missing host", code="STORE_CONFIG", context={"field": "host"})
        assert exc.code == "STORE_CONFIG"
        assert exc.context["field"] == "host"

    def test_context_defaults_to_empty_dict(self):
        exc = FedStoreException("test")
        exc.context["key"] = "value"
        assert FedStoreException("test2").context == {}


class TestExceptionHierarchy:
    def test_infrastructure_is_fedstore(self):
        assert issubclass(InfrastructureException, FedStoreException)

    def test_configuration_is_infrastructure(self):
        assert issubclass(ConfigurationException, InfrastructureException)

    def test_connection_is_infrastructure(self):
        assert issubclass(StoreConnectionException, InfrastructureException)

    def test_connection_is_not_builtin_connection_error(self):
        assert not issubclass(StoreConnectionException, ConnectionError)

    def test_payload_decode_is_data_integrity(self):
        assert issubclass(PayloadDecodeException, DataIntegrityException)
        assert issubclass(DataIntegrityException, FedStoreException)
