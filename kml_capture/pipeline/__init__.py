"""Pipeline folder browser for saved artifacts."""

from kml_capture.pipeline.browser import PipelineBrowser

__all__ = ["PipelineBrowser"]
