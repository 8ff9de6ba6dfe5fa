import secrets
from secretstore.exceptions import EntropyUnavailable

# -----------------------------
# Entropy Source
# -----------------------------
def random_bytes(n: int) -> bytes:
    """
    Draw n bytes from the operating system CSPRNG.

    Used for private keys, salts and IVs. There is no fallback to a weaker
    generator: if the OS source fails the error is surfaced as
    EntropyUnavailable.

    Args:
        n: Number of bytes to draw

    Returns:
        n cryptographically secure random bytes
    """
    if not isinstance(n, int) or isinstance(n, bool) or n < 0:
        raise ValueError(f"Byte count must be a non-negative integer, got {n!r}")
    try:
        return secrets.token_bytes(n)
    except (OSError, NotImplementedError) as e:
        raise EntropyUnavailable(f"Secure random source unavailable: {e}") from e
