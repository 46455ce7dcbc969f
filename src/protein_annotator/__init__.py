"""Protein annotator: sliding-window fragmentation, structure labelling and motif scanning
persisted as one atomic DuckDB aggregate."""

__version__ = "0.1.0"
