"""Tests for component validation and construction rules."""
from datetime import date
from decimal import Decimal

import pytest

from money_showcase import (
    Amount,
    Checkbox,
    Component,
    ConstructionError,
    Date,
    Email,
    Fee,
    Group,
    Layout,
    Month,
    Number,
    Option,
    Select,
    Submit,
    Tel,
    Text,
    TextArea,
    UnknownComponent,
)
from money_showcase.core.codec import DEFAULT_REGISTRY
from money_showcase.core.components import AmountType


class _Probe(Component):
    kind = "probe"

    def __init__(self, result):
        self.result = result
        self.calls = 0

    def is_valid(self):
        self.calls += 1
        return self.result


@pytest.mark.parametrize(
    "control",
    [
        TextArea(name="comment", required=False),
        Text(name="nick", required=False),
        Email(name="email", required=False),
        Tel(name="phone", required=False),
        Number(name="count", required=False),
        Amount(name="sum", required=False),
        Date(name="day", required=False),
        Month(name="expiry", required=False),
        Checkbox(name="agree", required=False),
        Select(name="colour", required=False, options=[Option("Red", "red")]),
    ],
)
def test_empty_value_is_valid_when_not_required(control):
    assert control.is_valid_value("")
    assert control.is_valid_value(None)


@pytest.mark.parametrize(
    "control",
    [
        TextArea(name="comment"),
        Text(name="nick"),
        Email(name="email"),
        Tel(name="phone"),
        Number(name="count"),
        Amount(name="sum"),
        Date(name="day"),
        Month(name="expiry"),
        Checkbox(name="agree"),
        Select(name="colour", options=[Option("Red", "red")]),
    ],
)
def test_empty_value_is_invalid_when_required(control):
    assert not control.is_valid_value("")
    assert not control.is_valid_value(None)


INVALID_COMPONENTS = {
    "group": lambda: Group(items=[Group(items=[Text(name="inner")])]),
    "textarea": lambda: TextArea(name="comment", value="too long", max_length=3),
    "text": lambda: Text(name="nick", value="ABC", pattern="[a-z]+"),
    "email": lambda: Email(name="email", value="user@"),
    "tel": lambda: Tel(name="phone", value="12-34"),
    "number": lambda: Number(name="count", value="ten"),
    "amount": lambda: Amount(name="sum", value="10.001"),
    "date": lambda: Date(name="day", value="2020-02-30"),
    "month": lambda: Month(name="expiry", value="2020-13"),
    "checkbox": lambda: Checkbox(name="agree", value="yes", required=False),
    "select": lambda: Select(name="colour", value="green", options=[Option("Red", "red")]),
}


def test_every_kind_but_submit_can_be_invalid():
    assert set(INVALID_COMPONENTS) | {"submit"} == set(DEFAULT_REGISTRY.kinds())


@pytest.mark.parametrize("kind", sorted(INVALID_COMPONENTS))
def test_one_invalid_leaf_invalidates_the_root(kind):
    nested = Group(
        items=[
            Text(name="a", value="x"),
            Group(items=[Submit(), Group(items=[INVALID_COMPONENTS[kind]()])]),
        ]
    )
    assert not nested.is_valid()

    behind_option = Group(
        items=[
            Select(
                name="pick",
                value="x",
                options=[
                    Option("X", "x"),
                    Option("Y", "y", Group(items=[INVALID_COMPONENTS[kind]()])),
                ],
            )
        ]
    )
    assert not behind_option.is_valid()


@pytest.mark.parametrize("digits", [27, 30, 60])
def test_huge_amount_is_checked_without_raising(digits):
    amount = Amount(name="sum")
    assert amount.is_valid_value("1" + "0" * digits)
    assert amount.is_valid_value("1" + "0" * digits + ".25")
    assert not amount.is_valid_value("1" + "0" * digits + ".255")
    assert Group(items=[Amount(name="sum", value="9" * 40)]).is_valid()


def test_step_check_is_exact_for_long_bounds():
    number = Number(name="n", min=Decimal("0.000000000000000000000000000001"), step=Decimal("3"))
    assert number.is_valid_value("3.000000000000000000000000000001")
    assert not number.is_valid_value("3")


def test_text_length_and_pattern():
    text = Text(name="nick", min_length=2, max_length=5, pattern="[a-z]+")
    assert text.is_valid_value("abc")
    assert not text.is_valid_value("a")
    assert not text.is_valid_value("abcdef")
    assert not text.is_valid_value("ABC")


def test_text_rejects_broken_pattern():
    with pytest.raises(ConstructionError):
        Text(name="nick", pattern="[a-")


def test_email_and_tel_formats():
    email = Email(name="email")
    assert email.is_valid_value("user@example.com")
    assert not email.is_valid_value("user@")

    tel = Tel(name="phone", min_length=11)
    assert tel.is_valid_value("+79991234567")
    assert not tel.is_valid_value("12-34")
    assert not tel.is_valid_value("+7999")


def test_number_bounds_and_step():
    number = Number(name="count", min=Decimal("1"), max=Decimal("10"), step=Decimal("0.5"))
    assert number.is_valid_value("1")
    assert number.is_valid_value("1.5")
    assert number.is_valid_value("10")
    assert not number.is_valid_value("1.25")
    assert not number.is_valid_value("0.5")
    assert not number.is_valid_value("11")


@pytest.mark.parametrize("value", ["abc", "1,5", "NaN", "Infinity", "1e3", " "])
def test_malformed_number_is_invalid_even_when_optional(value):
    assert not Number(name="count", required=False).is_valid_value(value)


def test_unbounded_number_accepts_any_number():
    number = Number(name="count")
    assert number.is_valid_value("-1000000.123")


def test_amount_accepts_whole_kopecks_only():
    amount = Amount(name="sum", min=Decimal("10"), max=Decimal("15000"))
    assert amount.currency == "RUB"
    assert amount.is_valid_value("10.00")
    assert amount.is_valid_value("99.99")
    assert not amount.is_valid_value("10.005")
    assert not amount.is_valid_value("9.99")


def test_fee_is_clamped_and_rounded():
    fee = Fee(a=Decimal("0.02"), b=Decimal("10"), c=Decimal("30"), d=Decimal("100"))
    assert fee.compute(Decimal("500")) == Decimal("30.00")
    assert fee.compute(Decimal("1234.56")) == Decimal("34.69")
    assert fee.compute(Decimal("10000")) == Decimal("100.00")
    assert fee.amount_type is AmountType.AMOUNT


def test_date_validation():
    assert Date(name="day").is_valid_value("1987-12-31")

    bounded = Date(name="day", min=date(2000, 1, 1), max=date(2010, 1, 1))
    assert bounded.is_valid_value("2000-01-01")
    assert bounded.is_valid_value("2010-01-01")
    assert bounded.is_valid_value("2005-01-01")
    assert not bounded.is_valid_value("1999-12-31")
    assert not bounded.is_valid_value("2010-01-02")
    assert not bounded.is_valid_value("not a date")


def test_month_validation_normalizes_bounds():
    month = Month(name="expiry", min=date(2000, 1, 15), max=date(2010, 6, 30))
    assert month.min == date(2000, 1, 1)
    assert month.max == date(2010, 6, 1)
    assert month.is_valid_value("2010-06")
    assert month.is_valid_value("2000-01")
    assert not month.is_valid_value("2010-07")
    assert not month.is_valid_value("1999-12")
    assert not month.is_valid_value("2005-13")
    assert not month.is_valid_value("2005-01-01")


def test_checkbox_value_follows_checked_state():
    assert Checkbox(name="agree", checked=True).value == "true"
    assert Checkbox(name="agree").value == "false"
    assert Checkbox(name="agree", value="true").is_checked


def test_required_checkbox_must_be_checked():
    checkbox = Checkbox(name="agree")
    assert not checkbox.is_valid()
    checkbox.value = "true"
    assert checkbox.is_valid()
    assert not checkbox.is_valid_value("yes")


def test_optional_checkbox_accepts_both_states():
    checkbox = Checkbox(name="agree", required=False)
    assert checkbox.is_valid_value("false")
    assert checkbox.is_valid_value("true")
    assert not checkbox.is_valid_value("maybe")


def test_select_matches_option_by_value():
    select = Select(name="colour", options=[Option("Red", "red"), Option("Blue", "blue")])
    assert select.selected_option is None
    assert not select.is_valid()

    select.value = "blue"
    assert select.selected_option == Option("Blue", "blue")
    assert select.is_valid()

    select.value = "green"
    assert select.selected_option is None
    assert not select.is_valid()


def test_select_validity_covers_unselected_option_groups(colour_form):
    form = colour_form(colour="red", shade=None)
    select = form.items[0]

    assert select.is_valid_value("red")
    assert not select.is_valid()
    assert not form.is_valid()


def test_group_is_and_over_nested_children():
    inner = Group(items=[Text(name="a", value="x"), Text(name="b", value="y")])
    root = Group(items=[Text(name="c", value="z"), inner, Submit(label="Pay")])
    assert root.is_valid()

    inner.items[1].value = ""
    assert not root.is_valid()


def test_group_stops_at_first_invalid_child():
    first, second = _Probe(False), _Probe(True)
    assert not Group(items=[first, second]).is_valid()
    assert first.calls == 1
    assert second.calls == 0


def test_empty_group_is_valid():
    assert Group().is_valid()
    assert Group().layout is Layout.VERTICAL


def test_unknown_component_is_never_valid():
    unknown = UnknownComponent(type_name="captcha", raw={"type": "captcha"})
    assert unknown.kind == "captcha"
    assert not unknown.is_valid()
    assert not Group(items=[Text(name="a", value="x"), unknown]).is_valid()


def test_only_value_can_change_after_construction():
    text = Text(name="nick", value="a")
    text.value = "b"
    assert text.value == "b"
    with pytest.raises(AttributeError):
        text.name = "other"
    with pytest.raises(AttributeError):
        text.required = False


def test_group_structure_is_frozen():
    group = Group(items=[Text(name="a")])
    assert isinstance(group.items, tuple)
    with pytest.raises(AttributeError):
        group.layout = Layout.HORIZONTAL


@pytest.mark.parametrize(
    "factory",
    [
        lambda: Text(name=""),
        lambda: Group(items=None),
        lambda: Group(layout=None),
        lambda: Group(items=["not a component"]),
        lambda: Option(label=None, value="x"),
        lambda: Option(label="x", value=None),
        lambda: Select(name="colour", options=None),
    ],
)
def test_missing_required_fields_fail_at_construction(factory):
    with pytest.raises(ConstructionError):
        factory()


def test_layout_parse_falls_back_to_vertical():
    assert Layout.parse("HBox") is Layout.HORIZONTAL
    assert Layout.parse("garbage") is Layout.VERTICAL
    assert Layout.parse(None) is Layout.VERTICAL
