"""Named constants for the on-disk run layout.

Changing any of these makes existing workspaces unreadable, so treat them as
part of the storage format rather than as tunables.
"""

from __future__ import annotations

# Directory under the workspace root holding one subdirectory per run.
RUNS_DIRNAME: str = ".runs"

# Serialized RunConfig inside each run directory.
CONFIG_FILENAME: str = "config.json"

# Per-input trace files are named <input_index> + this suffix.
TRACE_FILE_SUFFIX: str = ".json"

# Text encoding for every file the store writes.
FILE_ENCODING: str = "utf-8"
