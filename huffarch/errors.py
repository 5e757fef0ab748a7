class HuffmanError(Exception):
    """Base class for everything this package raises on purpose."""


class FormatError(HuffmanError, ValueError):
    # archive is truncated, malformed or inconsistent; caller should discard output
    pass
