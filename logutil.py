import os
import threading
import terrain_config

LEVELS = {"DEBUG": 10, "INFO": 20, "WARN": 30, "ERROR": 40}

_local = threading.local()


def set_chunk(chunk_pos):
    """Tag messages from this thread with the chunk being generated (None clears)."""
    _local.chunk = chunk_pos


def enabled(scope, level="INFO"):
    if scope == "MAPGEN" and not getattr(terrain_config, "LOG_MAPGEN", True):
        return False
    threshold = LEVELS.get(getattr(terrain_config, "LOG_LEVEL", "INFO"), 20)
    return LEVELS.get(level, 20) >= threshold


def log(scope, msg, level="INFO"):
    if not enabled(scope, level):
        return
    pid = os.getpid()
    thread = threading.current_thread().name
    chunk = getattr(_local, "chunk", None)
    chunk_tag = f" c{chunk[0]},{chunk[1]}" if chunk is not None else ""
    text = f"[{level}{chunk_tag} pid{pid} thr{thread} {scope}] {msg}"
    use_color = getattr(terrain_config, "LOG_COLOR", True) and os.getenv("NO_COLOR") is None
    if use_color:
        if level == "ERROR":
            text = f"\x1b[31m{text}\x1b[0m"
        elif thread != "MainThread":
            # Worker thread generating chunks.
            text = f"\x1b[32m{text}\x1b[0m"
    print(text)
