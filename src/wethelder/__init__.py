"""WetHelder verified legal sources: freshness-filtered evidence for legal answers."""

__version__ = "0.1.0"
