"""
DocVault document management and ingestion service.

Stores uploaded documents (metadata record + file blob) per owner and runs a
simulated background ingestion pipeline exposed as a polled status resource.
"""

__version__ = "0.1.0"
