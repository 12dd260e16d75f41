"""hello-app: single-route greeting service for orchestrated deployment."""

__version__ = "1.0.0"
