"""Report writers for SiteMirror."""

from .json_report import render_json

__all__ = ["render_json"]
