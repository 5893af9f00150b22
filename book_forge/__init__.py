"""Merge a multi-chapter markdown book into one document and render it with Pandoc."""

from __future__ import annotations

__version__ = "0.1.0"
