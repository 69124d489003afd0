"""
Model Package Initialization
============================

Ensures models are properly registered when imported by the application.

Usage:
    from incident_tracker.models import Incident
"""

from .incident import Incident

__all__ = [
    "Incident",
]
