"""Record stores and the two persistence backends behind them."""

from ward_handover.services.storage.base import (
    HandoverNoteStore,
    HospitalAtNightStore,
    PatientStore,
    Storage,
    StorageError,
)
from ward_handover.services.storage.local import (
    JsonKeyValueStore,
    LocalStorage,
    create_local_storage,
)
from ward_handover.services.storage.sql import create_sql_storage

__all__ = [
    "HandoverNoteStore",
    "HospitalAtNightStore",
    "JsonKeyValueStore",
    "LocalStorage",
    "PatientStore",
    "Storage",
    "StorageError",
    "create_local_storage",
    "create_sql_storage",
]
