"""Data models for initguard."""
