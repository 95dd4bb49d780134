"""
Logging configuration for ParallelID.

Provides structured JSON logging for the credential audit trail.
"""

import json
import logging
import sys
import time
import uuid
from contextvars import ContextVar
from typing import List, Optional

# Context variable for request ID tracking
request_id_var: ContextVar[str] = ContextVar('request_id', default='')


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Outputs one JSON object per line for log aggregation.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": time.strftime('%Y-%m-%dT%H:%M:%SZ', time.gmtime(record.created)),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        request_id = request_id_var.get()
        if request_id:
            log_data["request_id"] = request_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, 'extra_fields'):
            log_data.update(record.extra_fields)

        return json.dumps(log_data, default=str)


class AuditLogger:
    """
    Specialized logger for credential lifecycle events.

    One method per kind of state change so that every entry carries the
    same fields for the same event type.
    """

    def __init__(self, name: str = "parallelid.audit"):
        self._logger = logging.getLogger(name)

    def _log(self, level: int, event_type: str, **kwargs) -> None:
        """Internal logging method with extra fields."""
        if not self._logger.isEnabledFor(level):
            return
        extra = {
            "event_type": event_type,
            "request_id": request_id_var.get(),
            **kwargs
        }

        record = self._logger.makeRecord(
            self._logger.name,
            level,
            "",
            0,
            f"{event_type}: {kwargs.get('message', '')}",
            (),
            None
        )
        record.extra_fields = extra
        self._logger.handle(record)

    def credential_issued(
        self,
        token_id: int,
        owner: str,
        path: str,
        traits: List[str],
        sequence: Optional[int] = None
    ) -> None:
        """Log a new credential. path is "admin" or "self_mint"."""
        self._log(
            logging.INFO,
            "CREDENTIAL_ISSUED",
            token_id=token_id,
            owner=owner,
            path=path,
            traits=traits,
            sequence=sequence,
            message=f"Credential {token_id} issued to {owner}"
        )

    def credential_renewed(self, token_id: int, last_issued_at: int, traits: List[str]) -> None:
        self._log(
            logging.INFO,
            "CREDENTIAL_RENEWED",
            token_id=token_id,
            last_issued_at=last_issued_at,
            traits=traits,
            message=f"Credential {token_id} renewed"
        )

    def trait_changed(self, token_id: int, trait: str, present: bool) -> None:
        self._log(
            logging.INFO,
            "TRAIT_CHANGED",
            token_id=token_id,
            trait=trait,
            present=present,
            message=f"Trait {trait} {'added to' if present else 'removed from'} credential {token_id}"
        )

    def sanctions_match(self, token_id: int, jurisdiction: int) -> None:
        self._log(
            logging.WARNING,
            "SANCTIONS_MATCH",
            token_id=token_id,
            jurisdiction=jurisdiction,
            message=f"Sanctions match in {jurisdiction} for credential {token_id}"
        )

    def credential_burned(self, token_id: int, caller: str) -> None:
        self._log(
            logging.INFO,
            "CREDENTIAL_BURNED",
            token_id=token_id,
            caller=caller,
            message=f"Credential {token_id} burned by {caller}"
        )

    def operation_rejected(self, operation: str, code: str, caller: Optional[str] = None, **details) -> None:
        """Log a refused operation with its error code."""
        self._log(
            logging.WARNING,
            "OPERATION_REJECTED",
            operation=operation,
            code=code,
            caller=caller,
            **details,
            message=f"{operation} rejected: {code}"
        )

    def configuration_changed(self, setting: str, old_value, new_value, caller: str) -> None:
        self._log(
            logging.INFO,
            "CONFIGURATION_CHANGED",
            setting=setting,
            old_value=old_value,
            new_value=new_value,
            caller=caller,
            message=f"{setting} changed"
        )

    def funds_withdrawn(self, amount: int, caller: str) -> None:
        self._log(
            logging.INFO,
            "FUNDS_WITHDRAWN",
            amount=amount,
            caller=caller,
            message=f"{amount} withdrawn by {caller}"
        )


def configure_logging(
    level: str = "INFO",
    json_format: bool = True,
    log_file: Optional[str] = None
) -> None:
    """
    Configure logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Use JSON formatting (recommended for production)
        log_file: Optional file path for log output
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if json_format:
        formatter = StructuredFormatter()
    else:
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


def set_request_id(request_id: Optional[str] = None) -> str:
    """
    Set the request ID for the current context.

    Args:
        request_id: Request ID to set, or None to generate one

    Returns:
        The request ID that was set
    """
    if request_id is None:
        request_id = str(uuid.uuid4())
    request_id_var.set(request_id)
    return request_id


# Global audit logger instance
audit_log = AuditLogger()
