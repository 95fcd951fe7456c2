"""Adapters for databases, object storage, counters and scanning."""
