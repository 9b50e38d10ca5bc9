"""
Common CLI utilities for consistent command behavior.
"""

import json
import logging
import sys
import click
from functools import wraps

from .exit_codes import INTERRUPTED, CommandError

logger = logging.getLogger(__name__)


def handle_command_errors(func):
    """
    Decorator that maps CommandError and Ctrl+C to exit codes.

    A CommandError is logged and echoed as a JSON error object on stdout,
    then the process exits with the error's exit code.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except KeyboardInterrupt:
            logger.error("Interrupted by user")
            sys.exit(INTERRUPTED)
        except click.ClickException:
            # Click exceptions already have their exit code
            raise
        except CommandError as e:
            logger.error(str(e))
            error_obj = {
                "error": str(e),
                "type": type(e).__name__,
                "exit_code": e.exit_code
            }
            if hasattr(e, 'errors'):
                error_obj['errors'] = e.errors
            print(json.dumps(error_obj, ensure_ascii=False), flush=True)
            sys.exit(e.exit_code)

    return wrapper
