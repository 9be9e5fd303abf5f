"""Deterministic synthetic dataset staging for benchmarks.

This package synthesizes benchmark datasets from a seed instead of
downloading real data, and stages them as newline-delimited JSON in
object storage.

Key Components:
- rng: Mulberry32 seeded generator with portable 32-bit arithmetic
- distributions: Samplers (pick, ranges, long tail, bell curve) on top of the rng
- generators: Per-table record synthesizers (clickbench, imdb, OLTP family)
- sizing: Size tier to per-table record count resolution
- pipeline: Check, generate, serialize, persist and report staging runs
- storage: Storage gateway protocol with in-memory and pyarrow filesystem backends
- dagster: Dagster resources and assets wrapping the pipeline

Example:
    >>> from benchstage.pipeline import StagingPipeline
    >>> from benchstage.storage import InMemoryStorage
    >>>
    >>> pipeline = StagingPipeline(InMemoryStorage())
    >>> manifest = pipeline.stage("clickbench", "1mb")
    >>> manifest.files[0].key
    'clickbench/1mb/hits.jsonl'
"""

from __future__ import annotations

__version__ = "0.1.0"
