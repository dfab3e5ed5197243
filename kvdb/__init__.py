"""
kvdb - database-backed key value store with inactivity expiration
"""

__version__ = "0.1.0"
