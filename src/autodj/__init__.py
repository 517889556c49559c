"""
AutoDJ - queue scheduling engine for radio automation.

Keeps each station's upcoming queue filled, timestamped with crossfade-aware
cue times, and resolves what should play next.
"""

__version__ = "0.1.0"
