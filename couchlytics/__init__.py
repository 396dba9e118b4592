"""
Couchlytics trade tools.

Trade value scoring for Madden franchise leagues, a client for the
Couchlytics backend, and a small preview service built on both.
"""

from .config import VERSION as __version__
