from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TenantContext:
    """Explicit tenant scope passed into every service call.

    company_id scopes every repository query; user_id is the acting user
    recorded on writes (created_by / decided_by).
    """

    company_id: int
    user_id: int
