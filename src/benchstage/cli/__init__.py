"""Command line interface for benchstage.

Entry point: ``benchstage.cli.main:cli``.
"""

from __future__ import annotations
