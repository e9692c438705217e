"""工具函数."""
