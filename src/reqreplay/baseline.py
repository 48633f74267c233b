"""
reqreplay Capture Loading

Loads captured traffic from JSON capture logs and turns a single capture
record into the RequestBaseline embedded in a generated replay script.
"""

import json
import logging
from pathlib import Path
from typing import List, Dict, Any, Union
from urllib.parse import urlparse

from .exceptions import CaptureError
from .replay_script import RequestBaseline

logger = logging.getLogger("reqreplay.baseline")

# Wrapper keys of the raw log and the alternative capture file layout
CAPTURE_LIST_KEYS = ('requests', 'captures')


class CaptureLoader:
    """
    Loader for capture log files.

    Handles the JSON layouts capture logs are written in:
    - {"requests": [...]}  (raw log format)
    - {"captures": [...]}  (alternative wrapper)
    - [...]                (direct list format)

    Example:
        loader = CaptureLoader("session.json")
        for capture in loader.load_and_validate():
            print(capture['method'], capture['url'])
    """

    def __init__(self, file_path: Union[str, Path]):
        """
        Initialize capture loader.

        Args:
            file_path: Path to capture JSON file
        """
        self.file_path = Path(file_path)

    def load(self) -> List[Dict[str, Any]]:
        """
        Load captures from JSON file.

        Returns:
            List of capture dictionaries

        Raises:
            FileNotFoundError: If capture file doesn't exist
            ValueError: If JSON format is invalid or unrecognized
        """
        if not self.file_path.exists():
            raise FileNotFoundError(f"Capture file not found: {self.file_path}")

        with open(self.file_path, 'r', encoding='utf-8') as f:
            captures = json.load(f)

        if isinstance(captures, dict):
            key = next((k for k in CAPTURE_LIST_KEYS if k in captures), None)
            if key is None:
                raise ValueError(
                    f"{self.file_path} has no capture list "
                    f"(looked for {', '.join(CAPTURE_LIST_KEYS)}; keys: {sorted(captures)})"
                )
            captures = captures[key]

        if not isinstance(captures, list):
            raise ValueError(
                f"{self.file_path}: expected a list of captures, got {type(captures).__name__}"
            )
        return captures

    @staticmethod
    def validate_capture(capture: Dict[str, Any]) -> bool:
        """Check that a capture has the fields needed to replay it."""
        return isinstance(capture, dict) and all(k in capture for k in ('url', 'method'))

    def load_and_validate(self) -> List[Dict[str, Any]]:
        """
        Load captures and filter out invalid ones.

        Returns:
            List of valid capture dictionaries
        """
        captures = self.load()
        valid_captures = [c for c in captures if self.validate_capture(c)]

        if len(valid_captures) < len(captures):
            invalid_count = len(captures) - len(valid_captures)
            logger.warning(f"Skipped {invalid_count} invalid captures in {self.file_path}")

        return valid_captures


def _body_bytes(body: Any) -> bytes:
    if body is None:
        return b''
    if isinstance(body, bytes):
        return body
    if isinstance(body, str):
        return body.encode('utf-8')
    # JSON bodies stored as structures
    return json.dumps(body).encode('utf-8')


def baseline_from_capture(capture: Dict[str, Any]) -> RequestBaseline:
    """
    Build a RequestBaseline from a capture record.

    Args:
        capture: Capture dict with at least 'method' and 'url'

    Returns:
        RequestBaseline with headers in captured order

    Raises:
        CaptureError: If the capture lacks a method or url
    """
    missing = [k for k in ('method', 'url') if not capture.get(k)]
    if missing:
        raise CaptureError(f"Capture is missing required fields: {', '.join(missing)}")

    parsed = urlparse(capture['url'])
    host = capture.get('host') or parsed.netloc
    # Keep a non-default port from the URL when the record only names the host
    if parsed.port and ':' not in host:
        host = f"{host}:{parsed.port}"

    url_path = parsed.path or '/'
    if parsed.query:
        url_path += f"?{parsed.query}"

    headers = capture.get('req_headers') or {}

    return RequestBaseline(
        host=host,
        url_path=url_path,
        method=capture['method'],
        headers={str(k): str(v) for k, v in headers.items()},
        body=_body_bytes(capture.get('req_body')),
        scheme=parsed.scheme or 'https'
    )


def load_baseline(file_path: Union[str, Path], index: int = 0) -> RequestBaseline:
    """
    Load the baseline for one capture in a capture log.

    Args:
        file_path: Path to capture JSON file
        index: Position of the capture among the valid captures

    Returns:
        RequestBaseline for the selected capture

    Raises:
        CaptureError: If the index is out of range
    """
    captures = CaptureLoader(file_path).load_and_validate()

    if not 0 <= index < len(captures):
        raise CaptureError(
            f"Capture index {index} out of range: {file_path} has {len(captures)} valid captures"
        )

    return baseline_from_capture(captures[index])
