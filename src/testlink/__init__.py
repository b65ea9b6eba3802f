"""TestLink - bidirectional traceability between tests and production code."""

__version__ = "0.1.0"
