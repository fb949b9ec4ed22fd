from .timing import FspCfg, FspMsg, FwType, TimingConfig
from .loader import TimingLoader
from .dump_writer import DumpWriter

__all__ = [
    "FwType",
    "FspCfg",
    "FspMsg",
    "TimingConfig",
    "TimingLoader",
    "DumpWriter",
]
