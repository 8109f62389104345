"""
Request-scoped context for console operations.

RunContext carries the correlation id of the HTTP request being served and
the tenant/bucket it targets, so log lines and outbound backend calls can be
tied back to one administrator action.
"""

from __future__ import annotations

import uuid

from pydantic import BaseModel


class RunContext(BaseModel):
    """Request-scoped context for console operations.

    Attributes:
        request_id: Unique identifier for request tracing.
        tenant_code: Tenant the operation resolved to, once known.
        bucket: Bucket the operation targets, if any.
    """

    request_id: str
    tenant_code: str | None = None
    bucket: str | None = None

    model_config = {"frozen": True}

    @classmethod
    def new(cls, bucket: str | None = None) -> "RunContext":
        """Create a context with a fresh request id.

        Args:
            bucket: Optional bucket the request targets.

        Returns:
            A new RunContext.
        """
        return cls(request_id=str(uuid.uuid4())[:8], bucket=bucket)

    def for_tenant(self, tenant_code: str, bucket: str | None = None) -> "RunContext":
        """Return a copy bound to a resolved tenant (and optionally a bucket)."""
        update: dict[str, str] = {"tenant_code": tenant_code}
        if bucket is not None:
            update["bucket"] = bucket
        return self.model_copy(update=update)

    def get_headers(self) -> dict[str, str]:
        """Get HTTP headers for propagating context to the backend.

        Returns:
            Dictionary of headers to inject into outbound requests.
        """
        return {"X-Request-Id": self.request_id}

    @property
    def log_prefix(self) -> str:
        if self.tenant_code:
            return f"[{self.request_id}] [{self.tenant_code}]"
        return f"[{self.request_id}]"
