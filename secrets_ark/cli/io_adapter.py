"""JSON input/output over standard streams."""
import json
import logging
from typing import Any, Optional, TextIO

from secrets_ark.secrets.domains.models import CheckInput, Report

logger = logging.getLogger(__name__)


class InputDecodeError(ValueError):
    """Input was present but is not a JSON object."""
    pass


def read_input_json(stream: TextIO) -> Optional[Any]:
    """
    Read an optional JSON document from a stream.

    Args:
        stream: Text stream, usually sys.stdin

    Returns:
        Decoded JSON value, or None if the stream is empty

    Raises:
        InputDecodeError: If the stream holds undecodable bytes or invalid JSON
        OSError: If the stream itself cannot be read
    """
    try:
        data = stream.read()
    except UnicodeDecodeError as e:
        raise InputDecodeError(f"input is not valid text: {e}") from e

    if not data or not data.strip():
        return None

    try:
        return json.loads(data)
    except json.JSONDecodeError as e:
        raise InputDecodeError(str(e)) from e


def parse_input(raw: Optional[Any]) -> CheckInput:
    """
    Build a CheckInput from a decoded JSON value.

    Unknown fields are ignored and a non-string message falls back to "".

    Raises:
        InputDecodeError: If the value is not a JSON object
    """
    if raw is None:
        return CheckInput()

    if not isinstance(raw, dict):
        raise InputDecodeError(f"expected a JSON object, got {type(raw).__name__}")

    message = raw.get("message", "")
    if not isinstance(message, str):
        logger.debug("Ignoring non-string 'message' in input")
        message = ""
    return CheckInput(message=message)


def write_output_json(report: Report, stream: TextIO) -> None:
    """Write the report as a single JSON document and flush."""
    stream.write(json.dumps(report.to_dict(), ensure_ascii=False))
    stream.flush()
