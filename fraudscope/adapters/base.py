"""Abstract base for signal adapters.

Signal adapters normalise raw producer reports (as posted by the browser
or by an upstream reputation service) into the typed signal models.

Architectural rules:
    1. Adapters must NOT mutate the incoming payload dict.
    2. adapt() must return a fully valid signal or raise ValueError.
    3. No adapter may touch the history or session stores.
    4. No detection heuristics live inside an adapter, only field mapping.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Iterable, TypeVar

from pydantic import BaseModel, TypeAdapter

from fraudscope.domain.enums import SignalKind

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SignalAdapter(ABC):
    """Base class for converting raw producer payloads into typed signals."""

    @property
    @abstractmethod
    def kind(self) -> SignalKind:
        """The producer this adapter translates for."""
        ...

    @abstractmethod
    def adapt(self, raw: dict[str, Any]) -> BaseModel:
        """Translate a raw payload dict into a validated signal.

        The input dict must NOT be mutated.

        Raises:
            ValueError: If the payload cannot be normalised.
        """
        ...


def known_tags(
    values: Iterable[Any] | None,
    parse: Callable[[str], T],
    source: str,
) -> list[T]:
    """Keep the labels *parse* recognises, logging and dropping the rest."""
    accepted: list[T] = []
    for value in values or ():
        try:
            accepted.append(parse(str(value)))
        except ValueError:
            logger.warning("Dropping unknown %s tag: %r", source, value)
    return accepted


_FLAG = TypeAdapter(bool)


def as_flag(value: Any) -> bool:
    """Parse a producer boolean with pydantic's rules ("false" is False).

    Raises:
        ValueError: If *value* is not a recognisable boolean.
    """
    if value is None:
        return False
    return _FLAG.validate_python(value)
