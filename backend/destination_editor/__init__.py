# Destination Editor Backend
"""
Destination form core with a FastAPI front.

A single form creates or edits a destination record. It validates input
against a declarative schema and reconciles its state with records loaded
from a remote API.

Architecture:
- Validation schema: per-field rules for text, number and file values
- Form controller: create/edit state machine over a value store
- Submission coordinator: serialized create/update calls
- Mode resolver: matches the requested record in the loaded collection
"""

__version__ = "1.0.0"
