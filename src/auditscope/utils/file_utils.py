"""Utility functions for file operations."""
import json
from pathlib import Path
from typing import Any, Union

from ..exceptions import SourceUnreadable


def read_source(file_path: Union[str, Path]) -> str:
    """Read a UTF-8 source file in full.

    Args:
        file_path: Path to the file

    Returns:
        File contents

    Raises:
        SourceUnreadable: If the file is missing, unreadable or not UTF-8
    """
    file_path = Path(file_path)
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise SourceUnreadable(str(file_path), e) from e


def read_json(file_path: Union[str, Path]) -> Any:
    """Read and parse a JSON file.

    Args:
        file_path: Path to the JSON file

    Returns:
        Parsed JSON data
    """
    file_path = Path(file_path)
    with open(file_path, 'r', encoding='utf-8') as f:
        return json.load(f)


def write_text(content: str, file_path: Union[str, Path]) -> Path:
    """Write text to a file, creating parent directories.

    Args:
        content: Text to write
        file_path: Path to the output file

    Returns:
        Path to the written file
    """
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    with open(file_path, 'w', encoding='utf-8') as f:
        f.write(content)
    return file_path
