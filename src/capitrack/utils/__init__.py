"""Utility functions for capitrack."""
