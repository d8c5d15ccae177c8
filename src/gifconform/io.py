"""I/O utilities for logging setup and atomic artifact writes."""

import logging
import tempfile
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from shutil import move

from .config import DEFAULT_PATH_CONFIG


def setup_logging(log_dir: Path, log_level: str = "INFO") -> logging.Logger:
    """Set up logging configuration for gifconform.

    Args:
        log_dir: Directory to store log files
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)

    Returns:
        Configured logger instance
    """
    log_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = log_dir / f"gifconform_{timestamp}.log"

    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler()
        ]
    )

    return logging.getLogger("gifconform")


@contextmanager
def atomic_write(target_path: Path, mode: str = "w"):
    """Context manager for atomic file writes using temporary files.

    Args:
        target_path: Final path where file should be written
        mode: File open mode

    Yields:
        File handle for writing

    Example:
        with atomic_write(Path("stream.gif"), "wb") as f:
            f.write(data)
    """
    target_path.parent.mkdir(parents=True, exist_ok=True)

    with tempfile.NamedTemporaryFile(
        mode=mode,
        dir=target_path.parent,
        delete=False,
        suffix=f".tmp_{target_path.name}"
    ) as temp_file:
        try:
            yield temp_file
            temp_file.flush()
            move(temp_file.name, target_path)
        except Exception:
            Path(temp_file.name).unlink(missing_ok=True)
            raise


def stream_file_name(
    test_name: str, stream_name: str | None = None, extension: str = "gif"
) -> str:
    """Timestamped file name: ``<test>[_<stream>].<yyyyMMddHHmmssffff>.<ext>``."""
    now = datetime.now()
    timestamp = now.strftime("%Y%m%d%H%M%S") + f"{now.microsecond // 100:04d}"
    suffix = "" if stream_name is None else f"_{stream_name}"
    return f"{test_name}{suffix}.{timestamp}.{extension}"


def save_stream(
    data: bytes,
    test_name: str,
    stream_name: str | None = None,
    results_dir: Path = DEFAULT_PATH_CONFIG.RESULTS_DIR,
    extension: str = "gif",
) -> Path:
    """Save an encoded stream for later inspection.

    Args:
        data: Encoded bytes
        test_name: Name of the run or test producing the stream
        stream_name: Optional qualifier appended to the test name
        results_dir: Directory receiving the file (created if missing)
        extension: File extension without the dot

    Returns:
        Path of the written file
    """
    target = results_dir / stream_file_name(test_name, stream_name, extension)
    with atomic_write(target, "wb") as f:
        f.write(data)
    logging.getLogger(__name__).info(f"💾 Saved {len(data)} bytes to {target}")
    return target
