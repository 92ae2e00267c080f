"""Concurrent insert/select throughput benchmark for distributed databases."""

__version__ = "0.1.0"
