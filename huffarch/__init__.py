from huffarch.codec import compress, decompress, compress_file, decompress_file
from huffarch.errors import FormatError, HuffmanError

__all__ = ["compress", "decompress", "compress_file", "decompress_file",
           "FormatError", "HuffmanError"]
