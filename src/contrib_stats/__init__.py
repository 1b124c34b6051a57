"""contrib-stats: per-contributor statistics across a GitHub organization."""

__version__ = "0.1.0"
