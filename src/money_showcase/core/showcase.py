"""
Root aggregates of the showcase protocol.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, Mapping, Optional, Tuple

from .components import Group
from .errors import ConstructionError
from .extraction import extract_payment_parameters

__all__ = [
    "AllowedMoneySource",
    "FieldError",
    "ReferenceFormat",
    "Showcase",
    "ShowcaseReference",
]


class AllowedMoneySource(Enum):
    """Money source codes known to this client."""

    WALLET = "wallet"
    CARDS = "cards"
    PAYMENT_CARD = "payment-card"
    CASH = "cash"

    @classmethod
    def parse(cls, code: str) -> Optional["AllowedMoneySource"]:
        for source in cls:
            if source.value == code:
                return source
        return None


@dataclass(frozen=True)
class FieldError:
    """Error reported by the server for a field, or for the whole form when ``name`` is ``None``."""

    alert: str
    name: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.alert:
            raise ConstructionError("FieldError.alert must not be empty")


@dataclass(frozen=True)
class Showcase:
    """
    One step of a payment flow as described by the server.

    ``hidden_fields`` are submitted unchanged with every step. ``money_sources``
    keeps the raw codes so unknown sources survive re-encoding; use
    :meth:`known_money_sources` for the recognised ones.
    """

    title: str
    hidden_fields: Mapping[str, str]
    form: Group
    money_sources: FrozenSet[str]
    errors: Tuple[FieldError, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if self.title is None:
            raise ConstructionError("title is None")
        if self.hidden_fields is None:
            raise ConstructionError("hidden_fields is None")
        if self.form is None:
            raise ConstructionError("form is None")
        if self.money_sources is None:
            raise ConstructionError("money_sources is None")
        if self.errors is None:
            raise ConstructionError("errors is None")
        if not isinstance(self.form, Group):
            raise ConstructionError(f"form {self.form!r} is not a Group")
        object.__setattr__(
            self, "hidden_fields", MappingProxyType(dict(self.hidden_fields))
        )
        object.__setattr__(self, "money_sources", frozenset(self.money_sources))
        object.__setattr__(self, "errors", tuple(self.errors))

    def known_money_sources(self) -> FrozenSet[AllowedMoneySource]:
        parsed = (AllowedMoneySource.parse(code) for code in self.money_sources)
        return frozenset(source for source in parsed if source is not None)

    def is_valid(self) -> bool:
        return self.form.is_valid()

    def payment_parameters(self) -> Dict[str, str]:
        """Shortcut for :func:`~money_showcase.core.extraction.extract_payment_parameters`."""
        return extract_payment_parameters(self)

    def errors_for(self, name: Optional[str]) -> Tuple[FieldError, ...]:
        return tuple(error for error in self.errors if error.name == name)


class ReferenceFormat(Enum):
    JSON = "json"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, code: Optional[str]) -> "ReferenceFormat":
        for fmt in cls:
            if fmt.value == code:
                return fmt
        return cls.UNKNOWN


@dataclass(frozen=True)
class ShowcaseReference:
    """
    Search result pointing at a showcase.

    ``top_index`` ranks popular showcases (lower is higher). When ``url`` is
    set, ``params`` must be posted there to obtain the first step.
    """

    scid: int
    title: str
    format: ReferenceFormat = ReferenceFormat.JSON
    top_index: Optional[int] = None
    url: Optional[str] = None
    params: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.title:
            raise ConstructionError("ShowcaseReference.title must not be empty")
        if self.format is None:
            raise ConstructionError("ShowcaseReference.format is None")
        object.__setattr__(self, "params", MappingProxyType(dict(self.params or {})))

    @classmethod
    def sort_key(cls, reference: "ShowcaseReference") -> Tuple[bool, int, str]:
        """Order by ``top_index`` (missing last), then by title."""
        top = reference.top_index
        return (top is None, top if top is not None else 0, reference.title)

    @classmethod
    def ranked(cls, references: Iterable["ShowcaseReference"]) -> Tuple["ShowcaseReference", ...]:
        return tuple(sorted(references, key=cls.sort_key))
