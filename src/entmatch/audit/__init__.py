"""Audit logging subsystem for entmatch.

Main Components
---------------
- AuditLogger: JSONL event logger
- LogEvent: event envelope written per line
"""

from entmatch.audit.helpers import generate_run_id, get_package_version
from entmatch.audit.logger import AuditLogger
from entmatch.audit.models import LEVELS, LogEvent

__all__ = [
    "AuditLogger",
    "LogEvent",
    "LEVELS",
    "generate_run_id",
    "get_package_version",
]
