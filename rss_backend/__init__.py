"""
RSS Reader Backend

A FastAPI backend for the RSS Reader desktop application.
Provides local feed/article storage and Miniflux synchronization.
"""

__version__ = "2.1.0"
