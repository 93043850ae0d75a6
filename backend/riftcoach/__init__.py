"""
RiftCoach backend package.

Match scoring, player profiling and benchmark comparison for League of
Legends ranked games.
"""

__version__ = "0.1.0"
