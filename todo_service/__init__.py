"""Markdown-backed task list service."""
