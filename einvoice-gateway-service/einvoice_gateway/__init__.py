"""
Top-level package for the E-Invoice Validation Gateway.

This package exposes:
- XML well-formedness checking
- Normalization of remote validator responses into stable reports
- Report rendering (json, html, pdf, docx)
- CLI entrypoints
- HTTP API (FastAPI)
"""

__all__ = [
    "checker",
    "normalizer",
    "renderer",
    "schema",
]
