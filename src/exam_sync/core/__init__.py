"""Core configuration for exam-sync."""
