"""
Stream Avatar Creator.

Creates streaming-ready Digital Humans on the Unith platform. Thin HTTP
orchestration only: authentication, head visual and voice listings, head
creation, and stream URL derivation.
"""

__version__ = "1.0.0"
