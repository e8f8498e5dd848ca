"""I/O utilities for reading, writing and transferring collection files."""

from . import readers
from . import writers

__all__ = ["readers", "writers"]
