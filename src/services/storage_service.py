"""Durable key-value slots backed by JSON files with atomic writes and locking."""
import json
import logging
import os
import re
import shutil
import sys
import tempfile
import time
from contextlib import contextmanager
from typing import Any, Dict, Optional

if sys.platform != "win32":
    import fcntl

logger = logging.getLogger(__name__)

_SAFE_KEY = re.compile(r"^[A-Za-z0-9._-]+$")


def load_json(file_path: str) -> Dict[str, Any]:
    """
    Load and parse a JSON file with UTF-8 encoding.

    Raises:
        FileNotFoundError: If file doesn't exist
        json.JSONDecodeError: If JSON is malformed
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"File not found: {file_path}")

    with open(file_path, "r", encoding="utf-8") as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            raise json.JSONDecodeError(f"Malformed JSON in {file_path}: {e.msg}", e.doc, e.pos) from e


def save_json(file_path: str, data: Dict[str, Any], backup: bool = True) -> None:
    """
    Save data to JSON file atomically with UTF-8 encoding.

    Args:
        file_path: Path to JSON file
        data: Dictionary to save
        backup: If True, copy the previous file to "<file>.backup" first

    Raises:
        IOError: If backup or write fails
    """
    dir_path = os.path.dirname(file_path)
    if dir_path and not os.path.exists(dir_path):
        os.makedirs(dir_path, exist_ok=True)

    if backup and os.path.exists(file_path):
        try:
            shutil.copy2(file_path, f"{file_path}.backup")
        except OSError as e:
            raise IOError(f"Failed to create backup: {e}") from e

    temp_fd, temp_path = tempfile.mkstemp(
        dir=dir_path if dir_path else ".",
        prefix=".tmp_",
        suffix=".json"
    )

    try:
        with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
            f.flush()
            os.fsync(f.fileno())
        os.replace(temp_path, file_path)
    except (OSError, TypeError, ValueError) as e:
        if os.path.exists(temp_path):
            try:
                os.remove(temp_path)
            except OSError:
                logger.warning(f"Could not remove temp file {temp_path}")
        raise IOError(f"Failed to write file {file_path}: {e}") from e


@contextmanager
def lock_file(file_path: str, timeout: float = 5.0):
    """
    Context manager holding an exclusive lock next to a data file.

    Args:
        file_path: Path of the file being protected
        timeout: Maximum seconds to wait for lock acquisition (default: 5.0)

    Usage:
        with lock_file('data/storage/subx-user-storage.json'):
            save_json('data/storage/subx-user-storage.json', document)

    Raises:
        TimeoutError: If unable to acquire lock within timeout
    """
    lock_path = f"{file_path}.lock"
    dir_path = os.path.dirname(lock_path)
    if dir_path and not os.path.exists(dir_path):
        os.makedirs(dir_path, exist_ok=True)

    start_time = time.time()

    if sys.platform == "win32":
        lock_fd = None
        while True:
            try:
                lock_fd = os.open(lock_path, os.O_CREAT | os.O_EXCL | os.O_RDWR)
                break
            except FileExistsError:
                if time.time() - start_time > timeout:
                    raise TimeoutError(f"Could not acquire lock on {file_path} within {timeout}s")
                time.sleep(0.05)

        try:
            yield
        finally:
            os.close(lock_fd)
            try:
                os.remove(lock_path)
            except OSError:
                logger.warning(f"Could not remove lock file {lock_path}")
    else:
        with open(lock_path, "a") as lock_handle:
            while True:
                try:
                    fcntl.flock(lock_handle.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
                    break
                except OSError:
                    if time.time() - start_time > timeout:
                        raise TimeoutError(f"Could not acquire lock on {file_path} within {timeout}s")
                    time.sleep(0.05)

            try:
                yield
            finally:
                fcntl.flock(lock_handle.fileno(), fcntl.LOCK_UN)


class JsonFileStorage:
    """
    Named durable slots, one JSON file per key inside a directory.

    Mirrors an async key-value store (get/set/remove by key) with
    atomic file replacement underneath.
    """

    def __init__(self, directory: str, backup: bool = True):
        self.directory = directory
        self.backup = backup

    def path_for(self, key: str) -> str:
        """
        Return the file path holding a slot.

        Raises:
            ValueError: If key contains characters unsafe for a file name
        """
        if not key or not _SAFE_KEY.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return os.path.join(self.directory, f"{key}.json")

    def get_item(self, key: str) -> Optional[Dict[str, Any]]:
        """
        Read a slot.

        Returns:
            dict: Stored document, or None if the slot was never written

        Raises:
            json.JSONDecodeError: If the stored file is malformed
            OSError: If the file cannot be read
        """
        path = self.path_for(key)
        if not os.path.exists(path):
            return None
        return load_json(path)

    def set_item(self, key: str, document: Dict[str, Any]) -> None:
        """
        Write a slot atomically.

        Raises:
            IOError: If the write fails
            TimeoutError: If another writer holds the lock too long
        """
        path = self.path_for(key)
        with lock_file(path):
            save_json(path, document, backup=self.backup)

    def remove_item(self, key: str) -> bool:
        """Delete a slot. Returns False if it did not exist."""
        path = self.path_for(key)
        with lock_file(path):
            if not os.path.exists(path):
                return False
            os.remove(path)
        return True

    def preserve_item(self, key: str, label: str) -> Optional[str]:
        """
        Copy a slot's file aside as "<key>.<label>.json", replacing any older copy.

        Returns:
            str: Path of the copy, or None if the slot does not exist
        """
        path = self.path_for(key)
        copy_path = self.path_for(f"{key}.{label}")
        with lock_file(path):
            if not os.path.exists(path):
                return None
            shutil.copy2(path, copy_path)
        return copy_path
