"""DevTrack: personal task tracking API and client."""

__version__ = "1.0.0"
