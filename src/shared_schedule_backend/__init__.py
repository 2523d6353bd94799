"""
Shared Schedule Backend.

Owners plan activities on a calendar (one-time, daily or weekly) and share
a read-only view of any day. The ASGI app lives in `main.py`.
"""
__version__ = "0.1.0"
