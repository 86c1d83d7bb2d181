"""Stateless helpers: geometry dedup, pipeline paths, distance formatting."""
