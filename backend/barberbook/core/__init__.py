# Core package: configuration, exceptions, logging and API helpers

from . import config, exceptions

__all__ = [
    "config",
    "exceptions",
]
