"""Global logging and error handling utilities"""
import logging
import sys

# Detect debug mode - True if running from source, False if packaged
DEBUG_MODE = not getattr(sys, 'frozen', False)

logger = logging.getLogger('pasteup')


def loggerRaise(e: Exception, user_message: str = None, title: str = "Error"):
    """Log a failure that must propagate, then re-raise it
    
    Args:
        e: The exception to handle
        user_message: User-friendly summary logged alongside the traceback (optional)
        title: Prefix for the log record
    
    In DEBUG_MODE:
        - Just raises the exception (shows full traceback)
    
    In RELEASE_MODE:
        - Logs the user message with the full traceback
        - Then raises the exception
    """
    if DEBUG_MODE:
        # Dev mode: just raise to see full traceback
        raise e

    message = user_message if user_message else str(e)
    logger.error(f"{title}: {message}", exc_info=e)
    raise e
