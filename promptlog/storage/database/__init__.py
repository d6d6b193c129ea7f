"""
PostgreSQL-backed conversation storage.
"""

from .conversation_store import ConversationStore
from .utils import (
    build_insert_query,
    mask_database_url,
    record_to_dict,
    records_to_list,
)

__all__ = [
    "ConversationStore",
    "build_insert_query",
    "mask_database_url",
    "record_to_dict",
    "records_to_list",
]
