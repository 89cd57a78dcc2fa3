"""Batch orchestration, progress, summary and output services."""
