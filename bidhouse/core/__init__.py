"""
Core support: logging, reactive streams, messaging and health checks
"""
