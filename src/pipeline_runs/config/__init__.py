"""Configuration: schema, loading from env/file, and storage-format constants."""

from .schema import DEFAULT_CONFIG, RunsConfig
from .loader import load_config
from .constants import CONFIG_FILENAME, FILE_ENCODING, RUNS_DIRNAME, TRACE_FILE_SUFFIX

get_config = load_config  # alias

__all__ = [
    "DEFAULT_CONFIG", "RunsConfig", "load_config", "get_config",
    "CONFIG_FILENAME", "FILE_ENCODING", "RUNS_DIRNAME", "TRACE_FILE_SUFFIX",
]
