from .core import atomic_write, encode_content, read_text

__all__ = ["atomic_write", "encode_content", "read_text"]
