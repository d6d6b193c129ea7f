"""
Shared utilities: Result types and structured logging.
"""
