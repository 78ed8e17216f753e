"""
Persistence layer.

Stores own record storage and expose a narrow interface to the service
layer.  Lookups that match nothing raise ``RecordNotFoundError`` rather
than returning an empty value.
"""

from .user_store import (  # noqa: F401
    EmailConflictError,
    RecordNotFoundError,
    SQLiteUserStore,
    StoreError,
    UserRecord,
    UserStore,
)
