class PackBitsError(ValueError):
    """Packed data does not decode to what the caller expects."""
