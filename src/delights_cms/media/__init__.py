"""Blob lifecycle helpers."""
