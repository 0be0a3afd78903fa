from .dao import cli, main

__all__ = ["cli", "main"]
