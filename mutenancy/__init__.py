"""Tenant context level and tenantid reconciliation for a hierarchical context tree."""
