"""Allocation policy: exclusion window and quota sampling."""
