"""
Standard exit codes for repolog commands.

Following Unix/POSIX conventions for command-line tools.
"""
# Standard POSIX exit codes
SUCCESS = 0              # Successful termination
GENERAL_ERROR = 1        # General errors
USAGE_ERROR = 2          # Misuse of shell command (wrong arguments, etc.)

# Application-specific exit codes (64-113 are typically available)
REPOSITORY_ERROR = 65    # Repository exists but could not be read
CONFIG_ERROR = 66        # Configuration file error
PARTIAL_SUCCESS = 71     # Changelogs written but may be incomplete
INTERRUPTED = 130        # Terminated by Ctrl+C (SIGINT)


class CommandError(Exception):
    """
    Exception that commands can raise to indicate specific exit codes.
    """
    def __init__(self, message: str, exit_code: int = GENERAL_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


class RepositoryError(CommandError):
    """Raised when the repository cannot be read."""
    def __init__(self, message: str):
        super().__init__(message, REPOSITORY_ERROR)


class ConfigError(CommandError):
    """Raised when there's a configuration error."""
    def __init__(self, message: str):
        super().__init__(message, CONFIG_ERROR)


class PartialSuccessError(CommandError):
    """Raised when generation finished but some output may be incomplete."""
    def __init__(self, message: str, errors: int = 0):
        super().__init__(message, PARTIAL_SUCCESS)
        self.errors = errors

