"""Ingestion layer.

Turns externally parsed per-frame records into decoded samples and the
stream values a visualization consumer reads.
"""

__all__: list[str] = []
