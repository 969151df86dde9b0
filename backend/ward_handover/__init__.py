"""
Ward Handover Backend - Nursing handover and Hospital at Night records

This package provides the backend services for the ward handover tool,
including patient records, SBAR handover notes, out-of-hours review
requests, and the board/dashboard views built on top of them.
"""

__version__ = "1.0.0"
__author__ = "Ward Handover Team"
