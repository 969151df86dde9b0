"""
Database models for Ward Handover.

This module exports all SQLAlchemy models and database utilities.
"""

from ward_handover.models.base import Base, async_session_maker, engine, init_models
from ward_handover.models.handover import HandoverNote
from ward_handover.models.hospital_at_night import HospitalAtNightEntry
from ward_handover.models.patient import Patient

__all__ = [
    "Base",
    "init_models",
    "engine",
    "async_session_maker",
    "Patient",
    "HandoverNote",
    "HospitalAtNightEntry",
]
