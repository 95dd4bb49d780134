"""
ParallelID Sanctions Monitoring

Sanctions safety is derived at read time from a record's last issuance
and recorded match; nothing here is stored or cached. A credential that
is no longer monitored is reported unsafe, not unknown.
"""

from datetime import timedelta

from .credential import CredentialRecord

ONE_YEAR = int(timedelta(days=365).total_seconds())
MONITORING_WINDOW = ONE_YEAR


class SanctionsMonitor:
    """Read-time predicates over a credential's sanctions state."""

    def __init__(self, window_seconds: int = MONITORING_WINDOW):
        if window_seconds < 0:
            raise ValueError("Monitoring window must not be negative")
        self.window_seconds = window_seconds

    def is_monitored(self, record: CredentialRecord, now: int) -> bool:
        """Monitoring lasts for the window after the last issuance, inclusive."""
        return now - record.last_issued_at <= self.window_seconds

    def is_safe(self, record: CredentialRecord, now: int) -> bool:
        return self.is_monitored(record, now) and record.sanctions_match is None

    def is_safe_in(self, record: CredentialRecord, jurisdiction: int, now: int) -> bool:
        if not self.is_monitored(record, now):
            return False
        return record.sanctions_match is None or record.sanctions_match != jurisdiction

    def monitored_until(self, record: CredentialRecord) -> int:
        return record.last_issued_at + self.window_seconds
