"""
Beacon payload loader.

Reads cached ``beacon-{cusip}-{date}.json`` files and parses raw payload text.
Loading errors are explicit: a missing file raises PayloadLoadError and bad
JSON raises PayloadParseError. Callers that want the dashboard to keep
working catch PayloadParseError and continue with fallback parameters.
"""

import json
import logging
import re
from pathlib import Path
from typing import Any

from annuity_income.config.settings import SETTINGS

logger = logging.getLogger(__name__)


class PayloadLoadError(Exception):
    """Raised when a payload file cannot be read."""

    pass


class PayloadParseError(PayloadLoadError):
    """Raised when payload text is not a JSON object."""

    pass


def normalize_policy_date(policy_date: str) -> str:
    """
    Convert MM/DD/YYYY to YYYY-MM-DD; other formats pass through.

    Examples
    --------
    >>> normalize_policy_date("11/01/2022")
    '2022-11-01'
    >>> normalize_policy_date("2022-11-01")
    '2022-11-01'
    """
    if re.fullmatch(r"\d{2}/\d{2}/\d{4}", policy_date):
        month, day, year = policy_date.split("/")
        return f"{year}-{month}-{day}"
    return policy_date


def payload_path(cusip: str, policy_date: str, data_dir: Path | None = None) -> Path:
    """
    Path of the cached payload for a contract.

    Parameters
    ----------
    cusip : str
        Product CUSIP
    policy_date : str
        Policy date, MM/DD/YYYY or YYYY-MM-DD
    data_dir : Path, optional
        Directory override (default: SETTINGS.data.payload_dir)

    Returns
    -------
    Path
        ``<data_dir>/beacon-{cusip}-{YYYY-MM-DD}.json``
    """
    directory = Path(data_dir) if data_dir is not None else SETTINGS.data.payload_dir
    file_name = f"{SETTINGS.data.payload_prefix}-{cusip}-{normalize_policy_date(policy_date)}.json"
    return directory / file_name


def parse_payload(text: str | bytes) -> dict[str, Any]:
    """
    Parse raw payload text into a JSON object.

    Parameters
    ----------
    text : str or bytes
        Payload body

    Returns
    -------
    dict
        Parsed payload

    Raises
    ------
    PayloadParseError
        If the text is not JSON or not a JSON object
    """
    try:
        payload = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError, TypeError) as e:
        raise PayloadParseError(f"Payload is not valid JSON: {e}") from e

    if not isinstance(payload, dict):
        raise PayloadParseError(
            f"Payload must be a JSON object, got {type(payload).__name__}"
        )
    return payload


def load_payload(cusip: str, policy_date: str, data_dir: Path | None = None) -> dict[str, Any]:
    """
    Load a cached Beacon payload from disk.

    Cached files may wrap the Beacon report under ``beaconData``; the
    wrapper is removed so the result always exposes ``tabs``/``basicInfo``.

    Parameters
    ----------
    cusip : str
        Product CUSIP
    policy_date : str
        Policy date, MM/DD/YYYY or YYYY-MM-DD
    data_dir : Path, optional
        Directory override

    Returns
    -------
    dict
        Raw payload

    Raises
    ------
    PayloadLoadError
        If the file does not exist or cannot be read
    PayloadParseError
        If the file content is not a JSON object
    """
    path = payload_path(cusip, policy_date, data_dir)
    if not path.exists():
        logger.warning(f"Beacon payload not found: {path.name}")
        raise PayloadLoadError(f"Beacon file not found: {path.name}")

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        logger.warning(f"Beacon payload unreadable: {path.name}: {e}")
        raise PayloadLoadError(f"Cannot read {path.name}: {e}") from e

    payload = parse_payload(text)
    report = payload.get("beaconData")
    if isinstance(report, dict):
        return report
    return payload
