"""Kernel services: flush-only helpers used by the operation boundary."""
