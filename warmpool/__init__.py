"""Adaptive warm IP pool sizing."""
