"""Workflow for checking which secrets are present in the environment."""
import logging
from typing import Iterable, List, Optional

from ..domains.environment import EnvironmentLookup, ProcessEnvironment
from ..domains.models import Report, SecretEntry, Status, StatusPolicy

logger = logging.getLogger(__name__)


def derive_status(found_count: int, total_count: int, policy: StatusPolicy) -> Status:
    """
    Classify a check outcome.

    Args:
        found_count: Number of keys that were set
        total_count: Number of keys checked
        policy: MULTI_KEY_GRADED or SINGLE_KEY_BINARY

    Returns:
        Status for the report

    Behavior:
        - MULTI_KEY_GRADED: all found -> SUCCESS, some -> PARTIAL, none -> NOT_FOUND.
          The all-found test comes first, so an empty key list is SUCCESS.
        - SINGLE_KEY_BINARY: all found -> SUCCESS, anything else -> ERROR
    """
    if policy == StatusPolicy.SINGLE_KEY_BINARY:
        if total_count > 0 and found_count == total_count:
            return Status.SUCCESS
        return Status.ERROR

    if found_count == total_count:
        return Status.SUCCESS
    if found_count > 0:
        return Status.PARTIAL
    return Status.NOT_FOUND


def build_message(entries: List[SecretEntry]) -> str:
    """Summarize entries as 'Found n/m secrets: KEY=Y, OTHER=N'."""
    found_count = sum(1 for entry in entries if entry.found)
    tokens = ", ".join(
        f"{entry.key}={'Y' if entry.found else 'N'}" for entry in entries
    )
    return f"Found {found_count}/{len(entries)} secrets: {tokens}"


def _lookup(environment: EnvironmentLookup, key: str) -> Optional[str]:
    try:
        return environment.lookup(key)
    except Exception as e:
        # Lookup failures count as "not found" for this key only
        logger.warning(f"Environment lookup failed for {key}, treating as not found: {e}")
        return None


def check_secrets(
    keys: Iterable[str],
    environment: Optional[EnvironmentLookup] = None,
    policy: StatusPolicy = StatusPolicy.MULTI_KEY_GRADED,
) -> Report:
    """
    Check which of the given keys are set.

    Args:
        keys: Environment variable names, in report order
        environment: Lookup capability (defaults to the process environment)
        policy: How to derive the report status

    Returns:
        Report with one entry per distinct key, in the given order

    Behavior:
        - Never raises for a missing or unreadable variable
        - Never modifies the environment
        - Duplicate keys keep their first position only
    """
    if environment is None:
        environment = ProcessEnvironment()

    entries: List[SecretEntry] = []
    for key in dict.fromkeys(keys):
        value = _lookup(environment, key)
        entries.append(SecretEntry(key=key, found=value is not None, value=value))

    found_count = sum(1 for entry in entries if entry.found)
    total_count = len(entries)
    status = derive_status(found_count, total_count, policy)

    logger.debug(f"Found {found_count}/{total_count} secrets, status={status.value}")

    return Report(
        success=found_count > 0,
        status=status,
        secrets=entries,
        found_count=found_count,
        total_count=total_count,
        message=build_message(entries),
    )


def error_report(message: str) -> Report:
    """Build the report emitted when the check itself could not run."""
    return Report(
        success=False,
        status=Status.ERROR,
        secrets=[],
        found_count=0,
        total_count=0,
        message=message,
    )
