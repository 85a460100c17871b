"""
Structured logging configuration.
Outputs JSON in production so the hosting platform can index order events.
Outputs plain text in development for readability.
"""

import sys
import logging
import json
from datetime import datetime, timezone
from typing import Any, Dict

from jamoneria.config import settings


class JSONFormatter(logging.Formatter):
    """Format logs as JSON."""
    
    def format(self, record: logging.LogRecord) -> str:
        log_obj: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        
        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)
        
        # Order id is attached through `extra={"order_id": ...}` on lifecycle logs
        order_id = getattr(record, "order_id", None)
        if order_id:
            log_obj["order_id"] = order_id
            
        return json.dumps(log_obj, ensure_ascii=False)


def configure_logging() -> None:
    """Configure root logger."""
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.INFO if settings.is_production else logging.DEBUG)
    
    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        
    console_handler = logging.StreamHandler(sys.stdout)
    
    if settings.is_production:
        console_handler.setFormatter(JSONFormatter())
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        console_handler.setFormatter(formatter)
        
    root_logger.addHandler(console_handler)
    
    # Set levels for noisy libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    # httpx logs full request URLs, which include the Telegram bot token
    logging.getLogger("httpx").setLevel(logging.WARNING)
