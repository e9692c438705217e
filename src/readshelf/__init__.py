"""ReadShelf - 本地优先的稍后读文库."""

__version__ = "0.1.0"
