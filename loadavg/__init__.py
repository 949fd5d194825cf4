"""loadavg package exports."""

from loadavg.api import LoadAverage, avg, default_load_average, misc
from loadavg.config import PACKAGE_VERSION as __version__
from loadavg.errors import LoadNotImplementedError, SourceInitError, SourceReadError
from loadavg.model import DecayFactors, LoadSnapshot, MiscStat, SamplerRunState
from loadavg.sampler import Sampler

__all__ = [
    "DecayFactors",
    "LoadAverage",
    "LoadNotImplementedError",
    "LoadSnapshot",
    "MiscStat",
    "Sampler",
    "SamplerRunState",
    "SourceInitError",
    "SourceReadError",
    "__version__",
    "avg",
    "default_load_average",
    "misc",
]
