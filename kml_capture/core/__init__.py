"""Core utilities and shared infrastructure.

- config: Configuration loading and validation
- constants: Endpoint paths, defaults and user-facing messages
- exceptions: Custom exception hierarchy
- hooks: Callbacks into the owning UI (confirm, alert, save-success)
"""
