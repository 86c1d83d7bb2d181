"""Stateless units of work: KML parsing and initial state restore."""
