"""KML Capture: geometry capture and synchronization core.

Tracks manually drawn features and KML-derived uploaded features, merges
them into one canonical set without duplicates, and coordinates save,
clear and upload operations against a remote persistence service.
"""

__version__ = "0.1.0"
