"""
Imposter party game: configuration, secret role reveal, and elimination rounds.
"""

__version__ = "0.1.0"
