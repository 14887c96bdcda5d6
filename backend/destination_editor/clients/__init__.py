"""
Remote destination API contract and its HTTP implementation.
"""

from destination_editor.clients.base import DestinationAPI
from destination_editor.clients.destination_client import DestinationAPIClient

__all__ = ["DestinationAPI", "DestinationAPIClient"]
