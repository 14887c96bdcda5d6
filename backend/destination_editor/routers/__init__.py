"""
FastAPI routers for the destination editor.
"""

from destination_editor.routers import forms

__all__ = ["forms"]
