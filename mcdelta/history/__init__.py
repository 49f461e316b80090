# mcdelta/history/__init__.py
"""Change history of version comparisons."""

from mcdelta.history.models import ChangeRecord, ChangeStatus
from mcdelta.history.store import ChangeHistoryStore

__all__ = ["ChangeHistoryStore", "ChangeRecord", "ChangeStatus"]
