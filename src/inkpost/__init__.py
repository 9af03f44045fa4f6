"""Inkpost - authentication and session service for the Inkpost blog platform.

Issues and verifies access/refresh tokens, manages password changes and
resets, and handles email verification.
"""

__version__ = "0.1.0"
