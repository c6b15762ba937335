"""
rssd - Run a command when an RSS feed publishes a new entry.

Tracks a list of RSS/Atom feeds and, on each synchronization, runs a
user-configured shell command for every feed whose newest entry changed.
"""

__version__ = "1.0.0"
