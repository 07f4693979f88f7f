"""Shared enumerations used across the allocation service."""

from __future__ import annotations

from enum import StrEnum


class AllocationStatus(StrEnum):
    """How a daily quota answer was produced."""

    CREATED = "created"
    """Generated and persisted by this request."""
    EXISTING = "existing"
    """Read back from the store (earlier request or a concurrent winner)."""
    REST_DAY = "rest_day"
    """Designated rest day; zero quota, nothing persisted."""


class QuotaErrorCode(StrEnum):
    """Error indicator carried by degraded quota responses."""

    INVALID_REQUEST = "invalid_request"
    NOT_FOUND = "not_found"
    STORE_UNAVAILABLE = "store_unavailable"
    CATALOG_UNAVAILABLE = "catalog_unavailable"
    SERVICE_UNCONFIGURED = "service_unconfigured"
