from .run_store import FileSystemRunStore, open_run_store
from .workspace_root import find_workspace_root, init_workspace, resolve_workspace_root

__all__ = [
    "FileSystemRunStore",
    "open_run_store",
    "find_workspace_root",
    "init_workspace",
    "resolve_workspace_root",
]
