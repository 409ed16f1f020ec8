"""Global error reporting for tool window actions"""
import sys
import logging
from PyQt5.QtWidgets import QMessageBox

# Running from source re-raises immediately; frozen builds show a dialog first
DEBUG_MODE = not getattr(sys, 'frozen', False)

_logger = logging.getLogger('ArrayTool')
_main_window = None


def set_main_window(window):
    """Set the window that owns error dialogs"""
    global _main_window
    _main_window = window


def loggerRaise(e: Exception, user_message: str = None, title: str = "Array Tool Error"):
    """Report a failed tool action, then re-raise it

    Args:
        e: The exception to report
        user_message: Message shown in the dialog (defaults to str(e))
        title: Dialog title

    In DEBUG_MODE the exception is re-raised untouched so the traceback is
    visible. Otherwise the traceback is logged and a critical dialog is shown
    before re-raising.
    """
    if DEBUG_MODE:
        raise e

    _logger.error(user_message or str(e), exc_info=e)

    message = user_message if user_message else str(e)
    if _main_window:
        QMessageBox.critical(_main_window, title, message)
    else:
        _logger.error(f"No window for error dialog: {title} - {message}")

    raise e
