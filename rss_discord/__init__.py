"""
RSS Discord - Post new RSS feed entries to a Discord webhook.

A Python application that polls an RSS/Atom feed, posts entries
published since the previous run and remembers where it stopped.
"""

__version__ = "1.0.0"
