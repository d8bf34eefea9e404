from pathlib import Path

# Characters that are not safe in filenames on at least one supported OS
INVALID_FILENAME_CHARS = frozenset('/\\?%*:|"<>. ')


def sanitize_filename(name: str) -> str:
    """
    Map a free-form description to a filesystem-safe token.

    Every reserved character is replaced with an underscore. All other
    characters (including non-ASCII) pass through unchanged.

    Args:
        name: Task description or folder name

    Returns:
        The sanitized token (same length as the input)
    """
    return "".join("_" if c in INVALID_FILENAME_CHARS else c for c in name)


def format_duration(seconds: int) -> str:
    """Format seconds as HH:MM:SS (hours are not wrapped at 24)"""
    seconds = max(0, int(seconds))
    hours, remainder = divmod(seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def get_resource_path(relative_path: str) -> Path:
    """
    Get absolute path to a resource shipped inside the package.

    Args:
        relative_path: Path relative to the package root (e.g., "resources/templates")

    Returns:
        Absolute Path object
    """
    return Path(__file__).parent.absolute() / relative_path
