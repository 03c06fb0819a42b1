import os
import re
import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional


class SensitiveDataFilter(logging.Filter):
    """Filter to mask payment metadata in logs while preserving context"""

    SENSITIVE_PATTERNS = [
        # Payment references recorded on reactivation/assignment
        (r'payment_reference["\s]*[:=]["\s]*[^,}\s]+', 'payment_reference: [HIDDEN]'),
        (r'paymentReference["\s]*[:=]["\s]*[^,}\s]+', 'paymentReference: [HIDDEN]'),
        # Amounts
        (r'amount["\s]*[:=]["\s]*[\d.]+', 'amount: [HIDDEN]'),
        # Database credentials in connection URLs
        (r'://[^:/\s]+:[^@\s]+@', '://[CREDENTIALS]@'),
    ]

    def filter(self, record):
        if hasattr(record, 'msg'):
            msg = str(record.msg)
            for pattern, replacement in self.SENSITIVE_PATTERNS:
                msg = re.sub(pattern, replacement, msg, flags=re.IGNORECASE)
            record.msg = msg
        return True


def setup_logging(log_file_path: Optional[str] = None):
    """Configure application logging based on environment variables"""

    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    sql_log_level = os.getenv("SQL_LOG_LEVEL", "WARNING").upper()
    log_format = os.getenv("LOG_FORMAT", "text").lower()

    # Resolve default log file within logs/app.log regardless of CWD
    default_log_path = Path(__file__).resolve().parents[2] / "logs" / "app.log"
    log_file_path = log_file_path or os.getenv("LOG_FILE_PATH", str(default_log_path))
    enable_sensitive_filter = os.getenv("ENABLE_SENSITIVE_FILTER", "true").lower() == "true"

    Path(log_file_path).parent.mkdir(parents=True, exist_ok=True)

    if log_format == "json":
        formatter = logging.Formatter(
            '{"timestamp": "%(asctime)s", "level": "%(levelname)s", '
            '"module": "%(name)s", "message": "%(message)s", '
            '"line": %(lineno)d, "function": "%(funcName)s"}'
        )
    else:
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

    level = getattr(logging, log_level, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)

    file_handler = logging.handlers.RotatingFileHandler(
        log_file_path,
        maxBytes=10*1024*1024,  # 10MB
        backupCount=5
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)

    if enable_sensitive_filter:
        sensitive_filter = SensitiveDataFilter()
        console_handler.addFilter(sensitive_filter)
        file_handler.addFilter(sensitive_filter)

    root_logger.addHandler(console_handler)
    root_logger.addHandler(file_handler)

    logging.getLogger('sqlalchemy.engine').setLevel(getattr(logging, sql_log_level, logging.WARNING))
    logging.getLogger('gymadmin').setLevel(level)

    root_logger.info(
        "Logging initialized level=%s sql=%s file=%s",
        log_level,
        sql_log_level,
        log_file_path,
    )

    return root_logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for the given module name"""
    return logging.getLogger(f"gymadmin.{name}")


def log_transition(entity: str, entity_id, operation: str, old_status: str, new_status: str):
    """Log a successful lifecycle transition"""
    get_logger("lifecycle").info(
        "%s %s: %s %s -> %s", entity, entity_id, operation, old_status, new_status
    )


def log_rejected_operation(entity: str, entity_id, operation: str, error_code: str, details: str):
    """Log a lifecycle operation rejected by validation"""
    get_logger("lifecycle").warning(
        "%s %s: %s rejected (%s) - %s", entity, entity_id, operation, error_code, details
    )
