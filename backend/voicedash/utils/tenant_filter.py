"""
Tenant Filter Utility
Shared helper for applying consistent tenant filtering across Supabase queries
"""
from typing import Optional, Any


def apply_tenant_filter(query: Any, tenant_id: Optional[str], column: str = "tenant_id") -> Any:
    """
    Restrict a Supabase query to one tenant's rows.

    Args:
        query: Supabase query builder (from client.table(...).select(...))
        tenant_id: Tenant to scope to
        column: Name of the tenant column (default: "tenant_id")

    Returns:
        Query with the tenant filter applied

    Raises:
        ValueError: If tenant_id is empty. Pipeline reads are always
        tenant-scoped, so an unscoped query is a caller bug.
    """
    if not tenant_id:
        raise ValueError("tenant_id is required for pipeline queries")
    return query.eq(column, tenant_id)
