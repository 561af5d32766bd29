"""Sized ring buffers, reference-counted event slot pools and an allocator over them."""

__version__ = "0.3.3"