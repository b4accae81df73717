"""Environment lookup capability.

The checker reads secrets through an object with a single
``lookup(name) -> Optional[str]`` method, so tests can hand it a fake
environment instead of mutating ``os.environ``.
"""
import os
import logging
from typing import Mapping, Optional, Protocol

logger = logging.getLogger(__name__)


class EnvironmentLookup(Protocol):
    """Read-only view of a key-value environment."""

    def lookup(self, name: str) -> Optional[str]:
        ...


class ProcessEnvironment:
    """Looks secrets up in the live process environment."""

    def lookup(self, name: str) -> Optional[str]:
        """
        Get an environment variable as text.

        Args:
            name: Environment variable name

        Returns:
            The raw value, or None if unset or not representable as text
        """
        value = os.environ.get(name)
        if value is None:
            return None

        # On POSIX, bytes that are not valid UTF-8 surface as lone surrogates
        try:
            value.encode("utf-8")
        except UnicodeEncodeError:
            logger.debug(f"Environment variable {name} is set but is not valid text")
            return None
        return value


class MappingEnvironment:
    """Looks secrets up in a plain mapping."""

    def __init__(self, mapping: Optional[Mapping[str, str]] = None):
        self._mapping = dict(mapping or {})

    def lookup(self, name: str) -> Optional[str]:
        return self._mapping.get(name)
