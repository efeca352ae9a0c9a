"""Job board REST backend."""
