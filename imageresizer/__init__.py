"""Serverless image upload, resize and signed-URL service."""

__version__ = "1.0.0"
