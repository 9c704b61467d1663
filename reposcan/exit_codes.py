"""
Standard exit codes for reposcan commands.

Following Unix/POSIX conventions for command-line tools.
"""

# Standard POSIX exit codes
SUCCESS = 0              # Successful termination
GENERAL_ERROR = 1        # General errors
USAGE_ERROR = 2          # Misuse of shell command (wrong arguments, etc.)

# Application-specific exit codes (64-113 are typically available)
NOT_A_REPOSITORY = 65    # Path is not inside a git repository
PATH_NOT_FOUND = 66      # Root path does not exist (strict mode)
PERMISSION_ERROR = 67    # Root path cannot be listed (strict mode)
NO_REMOTE = 69           # Repository has no such remote
DATA_ERROR = 70          # Remote URL present but not parseable
INTERRUPTED = 130        # Terminated by Ctrl+C (SIGINT)

# Exit code mappings for reposcan and common exceptions
EXCEPTION_EXIT_CODES = {
    'PathNotFound': PATH_NOT_FOUND,
    'PermissionDenied': PERMISSION_ERROR,
    'NotARepository': NOT_A_REPOSITORY,
    'NoRemoteConfigured': NO_REMOTE,
    'SlugParseError': DATA_ERROR,
    'FileNotFoundError': PATH_NOT_FOUND,
    'PermissionError': PERMISSION_ERROR,
    'ValueError': DATA_ERROR,
    'KeyboardInterrupt': INTERRUPTED,
}


def get_exit_code_for_exception(exc: BaseException) -> int:
    """
    Get the appropriate exit code for an exception.

    Args:
        exc: The exception that occurred

    Returns:
        Appropriate exit code
    """
    exc_name = exc.__class__.__name__
    return EXCEPTION_EXIT_CODES.get(exc_name, GENERAL_ERROR)
