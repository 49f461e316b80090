# mcdelta/logging/tags.py
"""
Logging subsystem tags.

Prefixed to log messages so output stays searchable per subsystem.
"""

COMPARE = "[COMPARE]"
FINGERPRINT = "[FINGERPRINT]"
DIFF = "[DIFF]"
STATE = "[STATE]"
BARRIER = "[BARRIER]"
PIPELINE = "[PIPELINE]"
HISTORY = "[HISTORY]"
REPORT = "[REPORT]"
CLI = "[CLI]"
