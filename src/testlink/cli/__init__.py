"""TestLink command-line interface."""
