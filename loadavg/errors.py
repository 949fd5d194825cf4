"""
loadavg.errors
AUTHOR: carter-vin

Error kinds returned (not raised) by the accessor

- SourceInitError: counter could not be opened -> sampler stays degraded
- SourceReadError: one tick failed -> cleared by the next good tick
- LoadNotImplementedError: misc stats are not available on this platform
"""

from __future__ import annotations


class SourceInitError(RuntimeError):
    """Queue length counter could not be opened"""


class SourceReadError(RuntimeError):
    """Queue length counter failed for a single tick"""


class LoadNotImplementedError(NotImplementedError):
    """Extended load statistics are not provided on this platform"""

    def __init__(self, message: str = "not implemented yet") -> None:
        super().__init__(message)


def as_error_kind(error: BaseException, kind: type[RuntimeError]) -> RuntimeError:
    """
    Normalize any source failure into one of the published error kinds
    """
    if isinstance(error, kind):
        return error
    wrapped = kind(f"{type(error).__name__}: {error}")
    wrapped.__cause__ = error
    return wrapped
