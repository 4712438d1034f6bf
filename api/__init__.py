"""
HTTPS API for the Chameleon arithmetic service.

Exposes a greeting, an addition endpoint, and an addition endpoint that
records every sum in a SQLite database.
"""

__version__ = "1.0.0"
