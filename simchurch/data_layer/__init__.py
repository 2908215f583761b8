"""
Data Layer - name catalogs and save-slot persistence.

Provides:
- generate_name: random member/staff names
- SaveStore: JSON save slots
"""

from simchurch.data_layer.names import FIRST_NAMES, LAST_NAMES, generate_name
from simchurch.data_layer.save_store import SaveStore

__all__ = [
    "FIRST_NAMES",
    "LAST_NAMES",
    "generate_name",
    "SaveStore",
]
