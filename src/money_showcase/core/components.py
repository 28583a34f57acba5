"""
Model of the showcase form tree.

A form is a tree of :class:`Component` objects. Containers (:class:`Group`)
hold an ordered tuple of children; leaves are :class:`Parameter` kinds that
carry a user editable ``value`` and know how to validate it. A
:class:`Select` additionally owns :class:`Option` objects, each of which may
reveal a nested :class:`Group` when selected.

The structure of the tree is fixed once built. The only attribute that may be
reassigned afterwards is ``Parameter.value``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, localcontext
from enum import Enum
from typing import Any, ClassVar, Dict, Optional, Tuple

from .errors import ConstructionError

__all__ = [
    "Amount",
    "AmountType",
    "Checkbox",
    "Component",
    "Date",
    "Email",
    "Fee",
    "Group",
    "Layout",
    "Month",
    "Number",
    "Option",
    "Parameter",
    "Select",
    "SelectStyle",
    "Submit",
    "Tel",
    "Text",
    "TextArea",
    "UnknownComponent",
    "parse_decimal",
]

DATE_FORMAT = "%Y-%m-%d"
MONTH_FORMAT = "%Y-%m"

_NUMBER_RE = re.compile(r"[+-]?\d+(\.\d+)?")
_EMAIL_RE = re.compile(r"[^@\s]+@[^@\s]+\.[^@\s]+")
_TEL_RE = re.compile(r"\+?\d{5,15}")
_KOPECK = Decimal("0.01")


def parse_decimal(value: str) -> Optional[Decimal]:
    """Return ``value`` as a :class:`Decimal`, or ``None`` when it is not a plain number."""
    if not _NUMBER_RE.fullmatch(value):
        return None
    return Decimal(value)


def _is_on_step(number: Decimal, base: Decimal, step: Decimal) -> bool:
    """True when ``number`` is a whole number of ``step`` away from ``base``."""
    operands = (number, base, step)
    digits = max(op.adjusted() for op in operands) - min(op.as_tuple().exponent for op in operands)
    # exact arithmetic: the default 28 digit context cannot hold long values
    with localcontext() as context:
        context.prec = max(context.prec, digits + 2)
        return (number - base) % step == 0


class Component:
    """Any node of a showcase form."""

    kind: ClassVar[str] = ""

    def is_valid(self) -> bool:
        raise NotImplementedError


class Layout(Enum):
    """Arrangement of the children of a :class:`Group`."""

    VERTICAL = "VBox"
    HORIZONTAL = "HBox"

    @property
    def code(self) -> str:
        return self.value

    @classmethod
    def parse(cls, code: Optional[str]) -> "Layout":
        for layout in cls:
            if layout.value == code:
                return layout
        return cls.VERTICAL


@dataclass(frozen=True)
class Group(Component):
    """Ordered container of components."""

    items: Tuple[Component, ...] = ()
    layout: Layout = Layout.VERTICAL
    label: Optional[str] = None

    kind: ClassVar[str] = "group"

    def __post_init__(self) -> None:
        if self.items is None:
            raise ConstructionError("Group.items is None")
        if self.layout is None:
            raise ConstructionError("Group.layout is None")
        items = tuple(self.items)
        for item in items:
            if not isinstance(item, Component):
                raise ConstructionError(f"Group item {item!r} is not a Component")
        object.__setattr__(self, "items", items)

    def __iter__(self):
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def is_valid(self) -> bool:
        """
        Validate every child, left to right, stopping at the first invalid one.

        Nested groups count whether or not they are currently reachable,
        including the groups owned by unselected select options.
        """
        return all(component.is_valid() for component in self.items)


@dataclass
class Parameter(Component):
    """
    Named leaf whose ``value`` is submitted as a payment parameter.

    An empty or ``None`` value is accepted only when the parameter is not
    required. Non-empty values are checked by :meth:`_accepts`, which
    subclasses override with their own format and range rules.
    """

    name: str
    value: Optional[str] = None
    required: bool = True
    readonly: bool = False
    label: Optional[str] = None
    hint: Optional[str] = None
    alert: Optional[str] = None
    value_autofill: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ConstructionError(f"{type(self).__name__}.name must not be empty")
        object.__setattr__(self, "_sealed", True)

    def __setattr__(self, key: str, value: Any) -> None:
        if key != "value" and self.__dict__.get("_sealed"):
            raise AttributeError(
                f"{type(self).__name__}.{key} is read-only once the form is built"
            )
        super().__setattr__(key, value)

    def is_valid(self) -> bool:
        return self.is_valid_value(self.value)

    def is_valid_value(self, value: Optional[str]) -> bool:
        if value is None or value == "":
            return not self.required
        return self._accepts(value)

    def _accepts(self, value: str) -> bool:
        return True


@dataclass
class TextArea(Parameter):
    """Multi-line free text."""

    min_length: Optional[int] = None
    max_length: Optional[int] = None

    kind: ClassVar[str] = "textarea"

    def _accepts(self, value: str) -> bool:
        if self.min_length is not None and len(value) < self.min_length:
            return False
        if self.max_length is not None and len(value) > self.max_length:
            return False
        return True


@dataclass
class Text(TextArea):
    """Single-line text, optionally constrained by a regular expression."""

    pattern: Optional[str] = None

    kind: ClassVar[str] = "text"

    def __post_init__(self) -> None:
        if self.pattern is not None:
            try:
                re.compile(self.pattern)
            except re.error as exc:
                raise ConstructionError(
                    f"{self.name}: invalid pattern {self.pattern!r}"
                ) from exc
        super().__post_init__()

    def _accepts(self, value: str) -> bool:
        if not super()._accepts(value):
            return False
        return self.pattern is None or re.fullmatch(self.pattern, value) is not None


@dataclass
class Email(Text):
    kind: ClassVar[str] = "email"

    def _accepts(self, value: str) -> bool:
        return super()._accepts(value) and _EMAIL_RE.fullmatch(value) is not None


@dataclass
class Tel(Text):
    kind: ClassVar[str] = "tel"

    def _accepts(self, value: str) -> bool:
        return super()._accepts(value) and _TEL_RE.fullmatch(value) is not None


@dataclass
class Number(Parameter):
    """Decimal number with optional inclusive bounds and step."""

    min: Optional[Decimal] = None
    max: Optional[Decimal] = None
    step: Optional[Decimal] = None

    kind: ClassVar[str] = "number"

    def _accepts(self, value: str) -> bool:
        number = parse_decimal(value)
        if number is None:
            return False
        if self.min is not None and number < self.min:
            return False
        if self.max is not None and number > self.max:
            return False
        if self.step is not None and self.step.is_finite() and self.step > 0:
            base = self.min if self.min is not None and self.min.is_finite() else Decimal(0)
            if not _is_on_step(number, base, self.step):
                return False
        return True


class AmountType(Enum):
    """Which side of the transfer the fee is calculated against."""

    AMOUNT = "amount"
    NET_AMOUNT = "netAmount"

    @classmethod
    def parse(cls, code: Optional[str]) -> "AmountType":
        for amount_type in cls:
            if amount_type.value == code:
                return amount_type
        return cls.AMOUNT


@dataclass(frozen=True)
class Fee:
    """
    Standard fee: ``a * amount + b``, no less than ``c`` and no more than ``d``.
    """

    a: Decimal = Decimal(0)
    b: Decimal = Decimal(0)
    c: Optional[Decimal] = None
    d: Optional[Decimal] = None
    amount_type: AmountType = AmountType.AMOUNT

    def compute(self, amount: Decimal) -> Decimal:
        fee = self.a * amount + self.b
        if self.c is not None and fee < self.c:
            fee = self.c
        if self.d is not None and fee > self.d:
            fee = self.d
        return fee.quantize(_KOPECK, rounding=ROUND_HALF_UP)


@dataclass
class Amount(Number):
    """Money amount in ``currency``; accepts whole kopecks by default."""

    step: Optional[Decimal] = _KOPECK
    currency: str = "RUB"
    fee: Optional[Fee] = None

    kind: ClassVar[str] = "amount"


@dataclass
class Date(Parameter):
    """Calendar date written as ``YYYY-MM-DD``; bounds are inclusive."""

    min: Optional[date] = None
    max: Optional[date] = None

    kind: ClassVar[str] = "date"
    date_format: ClassVar[str] = DATE_FORMAT

    @classmethod
    def parse(cls, value: str) -> Optional[date]:
        try:
            return datetime.strptime(value, cls.date_format).date()
        except ValueError:
            return None

    @classmethod
    def format(cls, value: date) -> str:
        # strftime leaves years before 1000 unpadded, strptime wants four digits
        return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"

    def _accepts(self, value: str) -> bool:
        parsed = self.parse(value)
        if parsed is None:
            return False
        if self.min is not None and parsed < self.min:
            return False
        if self.max is not None and parsed > self.max:
            return False
        return True


@dataclass
class Month(Date):
    """Year and month written as ``YYYY-MM``."""

    kind: ClassVar[str] = "month"
    date_format: ClassVar[str] = MONTH_FORMAT

    @classmethod
    def format(cls, value: date) -> str:
        return f"{value.year:04d}-{value.month:02d}"

    def __post_init__(self) -> None:
        if self.min is not None:
            self.min = self.min.replace(day=1)
        if self.max is not None:
            self.max = self.max.replace(day=1)
        super().__post_init__()


@dataclass
class Checkbox(Parameter):
    """
    Boolean flag submitted as ``"true"`` or ``"false"``.

    ``checked`` is the state the server rendered; an unset value starts from
    it. A required checkbox is valid only when checked.
    """

    checked: bool = False

    kind: ClassVar[str] = "checkbox"

    def __post_init__(self) -> None:
        if self.value is None:
            self.value = "true" if self.checked else "false"
        super().__post_init__()

    @property
    def is_checked(self) -> bool:
        return self.value == "true"

    def _accepts(self, value: str) -> bool:
        if value not in ("true", "false"):
            return False
        return value == "true" or not self.required


class SelectStyle(Enum):
    RADIO_GROUP = "RadioGroup"
    SPINNER = "Spinner"

    @classmethod
    def parse(cls, code: Optional[str]) -> "SelectStyle":
        for style in cls:
            if style.value == code:
                return style
        return cls.SPINNER


@dataclass(frozen=True)
class Option:
    """A choice of a :class:`Select`, optionally revealing a nested group."""

    label: str
    value: str
    group: Optional[Group] = None

    def __post_init__(self) -> None:
        if self.label is None:
            raise ConstructionError("Option.label is None")
        if self.value is None:
            raise ConstructionError("Option.value is None")
        if self.group is not None and not isinstance(self.group, Group):
            raise ConstructionError(f"Option.group {self.group!r} is not a Group")


@dataclass
class Select(Parameter):
    """Single choice among ``options``, matched by value."""

    options: Tuple[Option, ...] = ()
    style: SelectStyle = SelectStyle.SPINNER

    kind: ClassVar[str] = "select"

    def __post_init__(self) -> None:
        if self.options is None:
            raise ConstructionError(f"{self.name}: options is None")
        if self.style is None:
            raise ConstructionError(f"{self.name}: style is None")
        self.options = tuple(self.options)
        super().__post_init__()

    def find_option(self, value: Optional[str]) -> Optional[Option]:
        if value is None:
            return None
        for option in self.options:
            if option.value == value:
                return option
        return None

    @property
    def selected_option(self) -> Optional[Option]:
        """The option matching the current value, or ``None`` when nothing matches."""
        return self.find_option(self.value)

    def _accepts(self, value: str) -> bool:
        return self.find_option(value) is not None

    def is_valid(self) -> bool:
        if not super().is_valid():
            return False
        return all(
            option.group.is_valid()
            for option in self.options
            if option.group is not None
        )


@dataclass(frozen=True)
class Submit(Component):
    """Submit button. Carries no value and never blocks submission."""

    label: Optional[str] = None

    kind: ClassVar[str] = "submit"

    def is_valid(self) -> bool:
        return True


@dataclass(frozen=True)
class UnknownComponent(Component):
    """
    Placeholder for a component kind this client does not understand.

    The raw JSON object is kept so the component survives re-encoding. It is
    never valid, which keeps a form containing it from being submitted.
    """

    type_name: str
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def kind(self) -> str:  # type: ignore[override]
        return self.type_name

    def is_valid(self) -> bool:
        return False
