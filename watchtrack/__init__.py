"""
WatchTrack Playback API

Playback-session tracking, watch progress and discovery for a streaming catalog.
"""

__version__ = "1.0.0"
