"""
promptlog - prompt completion backend with durable conversation logging.

Accepts a user prompt, forwards it to an external completion service, stores
the exchange in PostgreSQL and exposes the history for listing, deletion and
CSV export.
"""

__version__ = "0.1.0"
