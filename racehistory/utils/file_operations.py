"""
Safe File Operations with Atomic Writes

Output documents are written to a temporary file in the target directory and
moved into place, so a crash never leaves a half-written JSON behind.
"""

import json
import logging
import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict

logger = logging.getLogger(__name__)


def atomic_json_write(
    file_path: Path, data: Dict[str, Any], create_backup: bool = False, indent: int = 2
) -> None:
    """Write JSON data to file atomically with optional backup, preserving original on failure."""
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    # Temp file in the same directory keeps the move on one filesystem
    temp_fd, temp_path = tempfile.mkstemp(
        suffix=".tmp", prefix=f".{file_path.name}.", dir=file_path.parent
    )

    try:
        with open(temp_fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=indent, ensure_ascii=False)

        if create_backup and file_path.exists():
            backup_path = file_path.with_suffix(file_path.suffix + ".backup")
            shutil.copy2(file_path, backup_path)
            logger.debug(f"Created backup: {backup_path}")

        shutil.move(temp_path, file_path)
        logger.debug(f"Atomically wrote: {file_path}")

    except Exception as e:
        Path(temp_path).unlink(missing_ok=True)
        raise IOError(f"Failed to write {file_path}: {e}") from e
