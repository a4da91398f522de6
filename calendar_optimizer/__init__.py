"""
Calendar optimization for coach appointment calendars.

Detects idle gaps between confirmed sessions, scores single-booking moves
that would consolidate them, and manages the suggestion lifecycle
(pending -> accepted/rejected -> applied/expired).
"""

__version__ = "0.1.0"
