# Tasklane CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""Global logger instance for Tasklane CLI applications."""
import logging

logger: logging.Logger = logging.getLogger("tasklane")
