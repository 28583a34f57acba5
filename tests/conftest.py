import copy

import pytest

from money_showcase import Group, Option, Select, Showcase, Text

SHOWCASE_DOCUMENT = {
    "title": "Mobile top-up",
    "hidden_fields": {"scid": "5551", "csrf": "abc"},
    "money_sources": ["wallet", "cards"],
    "error": [{"name": "phone", "alert": "Unknown operator"}],
    "form": {
        "type": "group",
        "layout": "VBox",
        "fields": [
            {
                "type": "tel",
                "name": "phone",
                "label": "Phone number",
                "hint": "11 digits",
                "minlength": 11,
                "maxlength": 12,
            },
            {
                "type": "amount",
                "name": "sum",
                "min": 10,
                "max": 15000,
                "currency": "RUB",
                "fee": {"a": 0.02, "b": 0, "c": 1, "amount_type": "netAmount"},
            },
            {
                "type": "group",
                "layout": "HBox",
                "label": "When",
                "fields": [
                    {"type": "date", "name": "pay_date", "required": False, "min": "2020-01-01"},
                    {"type": "month", "name": "card_expiry", "required": False, "max": "2030-12"},
                ],
            },
            {
                "type": "select",
                "name": "colour",
                "style": "RadioGroup",
                "options": [
                    {"label": "Red", "value": "red"},
                    {
                        "label": "Blue",
                        "value": "blue",
                        "group": {
                            "type": "group",
                            "layout": "VBox",
                            "fields": [
                                {"type": "text", "name": "shade", "pattern": "[a-z]+"}
                            ],
                        },
                    },
                ],
            },
            {"type": "textarea", "name": "comment", "required": False, "maxlength": 200},
            {"type": "email", "name": "email", "required": False},
            {"type": "number", "name": "count", "min": 1, "max": 5, "step": 1, "value": 1},
            {"type": "checkbox", "name": "agree", "checked": False, "required": False},
            {"type": "submit", "label": "Pay"},
        ],
    },
}


@pytest.fixture
def showcase_document():
    return copy.deepcopy(SHOWCASE_DOCUMENT)


def build_colour_form(colour=None, shade=None):
    """A select ``colour`` whose ``blue`` option reveals a ``shade`` text field."""
    shade_field = Text(name="shade", value=shade)
    colour_field = Select(
        name="colour",
        value=colour,
        options=[
            Option(label="Red", value="red"),
            Option(label="Blue", value="blue", group=Group(items=[shade_field])),
        ],
    )
    return Group(items=[colour_field])


@pytest.fixture
def colour_form():
    return build_colour_form


@pytest.fixture
def colour_showcase():
    def build(colour=None, shade=None, hidden_fields=None):
        return Showcase(
            title="Colours",
            hidden_fields=hidden_fields or {},
            form=build_colour_form(colour, shade),
            money_sources=frozenset(),
        )

    return build
