"""Taskflow - sales operations services."""
