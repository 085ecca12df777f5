"""Utility functions for sftpmirror."""

# =============================================================================
# Constants for transfer operations
# =============================================================================

# Default SSH port
DEFAULT_PORT: int = 22

# Connection timeout (seconds)
DEFAULT_TIMEOUT: float = 3.0

# Read size used when streaming a remote file to disk (32 KB)
DEFAULT_CHUNK_SIZE: int = 32 * 1024

# Radix for human-readable byte counts
SIZE_UNIT: int = 1024

SIZE_PREFIXES = "KMGTPE"


# =============================================================================
# Size formatting utilities
# =============================================================================


def format_size(size_bytes: int) -> str:
    """Format a byte count using IEC units with one decimal.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted size string (e.g., "500 B", "2.0 KB", "1.0 MB")

    Examples:
        >>> format_size(500)
        '500 B'
        >>> format_size(2048)
        '2.0 KB'
        >>> format_size(1048576)
        '1.0 MB'
    """
    if size_bytes < SIZE_UNIT:
        return f"{size_bytes} B"

    divisor = SIZE_UNIT
    exponent = 0
    n = size_bytes // SIZE_UNIT
    while n >= SIZE_UNIT and exponent < len(SIZE_PREFIXES) - 1:
        divisor *= SIZE_UNIT
        exponent += 1
        n //= SIZE_UNIT

    return f"{size_bytes / divisor:.1f} {SIZE_PREFIXES[exponent]}B"


def split_path_list(value: str) -> list[str]:
    """Split a comma-separated path list, keeping empty slots.

    Args:
        value: Comma-separated string (e.g., "/data,/logs")

    Returns:
        List of stripped items, one per comma-separated slot

    Examples:
        >>> split_path_list("/data, /logs")
        ['/data', '/logs']
        >>> split_path_list("a,,b")
        ['a', '', 'b']
    """
    return [item.strip() for item in value.split(",")]
