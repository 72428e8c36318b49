"""Ingestion and observability helpers."""
