"""
Structured logging for the book tracker using structlog.
Provides configurable output formats and a lifecycle audit logger.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union
import structlog
from structlog.stdlib import LoggerFactory


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "json",
    log_file: Optional[Union[str, Path]] = None,
    debug: bool = False
) -> None:
    """
    Set up structured logging with configurable output formats.
    
    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Output format (json or console)
        log_file: Optional log file path
        debug: Add call-site information to every event
    """
    
    # Configure standard library logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper()),
    )
    
    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]
    
    if debug:
        processors.append(structlog.processors.CallsiteParameterAdder())
    
    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )
    
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        
        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(getattr(logging, log_level.upper()))
        file_handler.setFormatter(logging.Formatter('%(message)s'))
        logging.getLogger().addHandler(file_handler)
    
    logger = structlog.get_logger(__name__)
    logger.info(
        "Logging system initialized",
        level=log_level,
        format=log_format,
        file=str(log_file) if log_file else None,
        debug=debug
    )


class AuditLogger:
    """
    Records book lifecycle events with bound context.
    """
    
    def __init__(self, name: str = "library.audit"):
        self.logger = structlog.get_logger(name)
        self.context = {}
    
    def bind_context(self, **kwargs) -> 'AuditLogger':
        """
        Bind context variables to every subsequent event.
        
        Args:
            **kwargs: Context variables to bind
            
        Returns:
            Self for method chaining
        """
        self.context.update(kwargs)
        return self
    
    def clear_context(self) -> 'AuditLogger':
        """Clear all context variables."""
        self.context.clear()
        return self
    
    def log_book_added(self, book_id: str, owner_id: str, title: str, total_books: int) -> None:
        self.logger.info(
            "Book added",
            book_id=book_id,
            owner_id=owner_id,
            title=title,
            total_books=total_books,
            **self.context
        )
    
    def log_book_updated(self, book_id: str, owner_id: str, has_note: bool) -> None:
        self.logger.info(
            "Book updated",
            book_id=book_id,
            owner_id=owner_id,
            has_note=has_note,
            **self.context
        )
    
    def log_book_removed(self, book_id: str, owner_id: str, removed: bool) -> None:
        # A miss is routine for repeated deletes.
        level = "info" if removed else "debug"
        getattr(self.logger, level)(
            "Book removed" if removed else "Book removal found nothing",
            book_id=book_id,
            owner_id=owner_id,
            **self.context
        )
    
    def log_rejection(self, owner_id: str, reason: str, book_id: Optional[str] = None) -> None:
        self.logger.warning(
            "Book rejected",
            owner_id=owner_id,
            book_id=book_id,
            reason=reason,
            **self.context
        )
    
    def log_capacity_reached(self, owner_id: str, max_books: int) -> None:
        self.logger.warning(
            "Book collection is full",
            owner_id=owner_id,
            max_books=max_books,
            **self.context
        )
