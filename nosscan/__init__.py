# nosscan/__init__.py
"""
Package initializer for nosscan.

Important:
- Do NOT import the RPC client or the scanner here.
- Keep only lightweight metadata and safe exports.
"""

__version__ = "1.0"

# Nothing else is imported at package import time.
# Modules should be imported explicitly (from nosscan import scanner, ...).
__all__ = ["__version__"]
