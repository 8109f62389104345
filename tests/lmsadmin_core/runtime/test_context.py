"""Unit tests for RunContext."""

import pytest

from lmsadmin_core.runtime.context import RunContext


class TestRunContext:
    """Tests for RunContext."""

    def test_new_generates_request_id(self):
        first, second = RunContext.new(), RunContext.new()

        assert first.request_id != second.request_id
        assert len(first.request_id) == 8

    def test_new_with_bucket(self):
        assert RunContext.new("NSG-LMS").bucket == "NSG-LMS"

    def test_context_is_immutable(self):
        """Context should be frozen/immutable."""
        ctx = RunContext(request_id="req-1")
        with pytest.raises(Exception):
            ctx.request_id = "changed"

    def test_for_tenant_returns_copy(self):
        ctx = RunContext(request_id="req-1", bucket="NSG-LMS")

        bound = ctx.for_tenant("NSG")

        assert bound.tenant_code == "NSG"
        assert bound.bucket == "NSG-LMS"
        assert ctx.tenant_code is None

    def test_headers_and_log_prefix(self):
        ctx = RunContext(request_id="req-1")

        assert ctx.get_headers() == {"X-Request-Id": "req-1"}
        assert ctx.log_prefix == "[req-1]"

    def test_log_prefix_names_bound_tenant(self):
        ctx = RunContext(request_id="req-1").for_tenant("RMW")

        assert ctx.log_prefix == "[req-1] [RMW]"
