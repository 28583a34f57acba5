"""Tests for payment parameter extraction and form traversal."""
from money_showcase import (
    Group,
    Option,
    Select,
    Showcase,
    Submit,
    Text,
    UnknownComponent,
    assign_values,
    decode_showcase,
    extract_payment_parameters,
)
from money_showcase.core.extraction import (
    fill_payment_parameters,
    find_invalid_components,
    iter_parameters,
)


def test_selected_option_group_is_included(colour_showcase):
    showcase = colour_showcase(colour="blue", shade="navy")
    assert extract_payment_parameters(showcase) == {"colour": "blue", "shade": "navy"}


def test_unselected_option_group_is_excluded(colour_showcase):
    showcase = colour_showcase(colour="red", shade="navy")
    assert extract_payment_parameters(showcase) == {"colour": "red"}


def test_hidden_fields_are_always_included():
    showcase = Showcase(
        title="Empty",
        hidden_fields={"csrf": "abc"},
        form=Group(),
        money_sources=frozenset(),
    )
    assert extract_payment_parameters(showcase) == {"csrf": "abc"}


def test_form_values_override_hidden_fields(colour_showcase):
    showcase = colour_showcase(colour="red", hidden_fields={"colour": "green", "scid": "1"})
    assert extract_payment_parameters(showcase) == {"colour": "red", "scid": "1"}


def test_duplicate_names_last_write_wins():
    form = Group(items=[Text(name="x", value="1"), Group(items=[Text(name="x", value="2")])])
    parameters = {}
    fill_payment_parameters(parameters, form)
    assert parameters == {"x": "2"}


def test_nested_groups_are_always_entered():
    form = Group(
        items=[
            Group(items=[Group(items=[Text(name="deep", value="d")])]),
            Submit(label="Pay"),
            UnknownComponent(type_name="banner"),
        ]
    )
    parameters = {}
    fill_payment_parameters(parameters, form)
    assert parameters == {"deep": "d"}


def test_unset_values_are_submitted_empty(colour_showcase):
    showcase = colour_showcase()
    assert extract_payment_parameters(showcase) == {"colour": ""}


def test_nested_selects_follow_each_selection():
    inner = Select(
        name="plan",
        value="pro",
        options=[
            Option("Basic", "basic", Group(items=[Text(name="basic_note", value="b")])),
            Option("Pro", "pro", Group(items=[Text(name="seats", value="5")])),
        ],
    )
    outer = Select(
        name="kind",
        value="business",
        options=[
            Option("Personal", "personal"),
            Option("Business", "business", Group(items=[inner])),
        ],
    )
    parameters = {}
    fill_payment_parameters(parameters, Group(items=[outer]))
    assert parameters == {"kind": "business", "plan": "pro", "seats": "5"}


def test_extraction_ignores_validity(colour_showcase):
    showcase = colour_showcase(colour="red", shade=None)
    assert not showcase.is_valid()
    assert showcase.payment_parameters() == {"colour": "red"}


def test_iter_parameters_includes_every_option_group(colour_form):
    names = [parameter.name for parameter in iter_parameters(colour_form(colour="red"))]
    assert names == ["colour", "shade"]


def test_find_invalid_components_lists_leaves_in_order(colour_form):
    unknown = UnknownComponent(type_name="captcha")
    form = Group(items=[Text(name="first"), colour_form(colour="red"), unknown])

    invalid = find_invalid_components(form)
    assert [getattr(item, "name", item.kind) for item in invalid] == ["first", "shade", "captcha"]


def test_assign_values_sets_matching_parameters(colour_form):
    form = colour_form()
    unmatched = assign_values(form, {"colour": "blue", "shade": "navy", "size": "XL"})

    assert unmatched == {"size"}
    assert form.is_valid()
    select = form.items[0]
    assert select.value == "blue"
    assert select.selected_option.group.items[0].value == "navy"


def test_decoded_showcase_extraction(showcase_document):
    showcase = decode_showcase(showcase_document)
    assign_values(
        showcase.form,
        {"phone": "79991234567", "sum": "100.00", "colour": "blue", "shade": "navy", "agree": "true"},
    )

    assert showcase.is_valid()
    assert extract_payment_parameters(showcase) == {
        "scid": "5551",
        "csrf": "abc",
        "phone": "79991234567",
        "sum": "100.00",
        "pay_date": "",
        "card_expiry": "",
        "colour": "blue",
        "shade": "navy",
        "comment": "",
        "email": "",
        "count": "1",
        "agree": "true",
    }
