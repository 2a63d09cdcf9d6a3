"""
Unit tests for the shared logging and metrics helpers and the endpoint label
used for request metrics.
"""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from prometheus_client import CollectorRegistry
from starlette.requests import Request

from brewery_api.src.middleware.request_logging import RequestLoggingMiddleware
from shared.logging.structured_logger import add_trace_context, make_app_context
from shared.metrics import ApiMetrics


class TestLogProcessors:

    def test_app_context_added(self):
        processor = make_app_context("Brewery API", "staging")

        event = processor(None, "info", {"event": "beer_created"})

        assert event["app"] == "Brewery API"
        assert event["environment"] == "staging"

    def test_no_trace_ids_outside_a_span(self):
        event = add_trace_context(None, "info", {"event": "beer_created"})

        assert "trace_id" not in event


class TestApiMetrics:

    def test_record_operation(self):
        registry = CollectorRegistry()
        metrics = ApiMetrics(registry=registry)

        metrics.record_operation("beer", "delete", "not_found")
        metrics.record_operation("beer", "delete", "not_found")

        value = registry.get_sample_value(
            "brewery_resource_operations_total",
            {"resource": "beer", "operation": "delete", "outcome": "not_found"},
        )
        assert value == 2.0

    def test_observe_pool(self):
        registry = CollectorRegistry()
        metrics = ApiMetrics(registry=registry)
        pool = MagicMock()
        pool.get_size.return_value = 5
        pool.get_idle_size.return_value = 3

        metrics.observe_pool(pool)
        metrics.observe_pool(None)

        assert registry.get_sample_value("database_connections_active") == 5.0
        assert registry.get_sample_value("database_connections_idle") == 3.0


class TestEndpointLabel:

    @staticmethod
    def request(path, route_path=None):
        scope = {"type": "http", "path": path}
        if route_path is not None:
            scope["route"] = SimpleNamespace(path=route_path)
        return Request(scope)

    @pytest.mark.parametrize("route_path", ["/api/v2/beer/{beer_id}", "/beer/{beer_id}"])
    def test_full_template_with_or_without_prefix_on_route(self, route_path):
        label = RequestLoggingMiddleware._endpoint_label(self.request("/api/v2/beer/7", route_path))

        assert label == "/api/v2/beer/{beer_id}"

    def test_collection_route(self):
        label = RequestLoggingMiddleware._endpoint_label(self.request("/api/v2/customer", "/customer"))

        assert label == "/api/v2/customer"

    def test_top_level_route(self):
        assert RequestLoggingMiddleware._endpoint_label(self.request("/ready", "/ready")) == "/ready"

    def test_unmatched(self):
        assert RequestLoggingMiddleware._endpoint_label(self.request("/nope")) == "unmatched"
