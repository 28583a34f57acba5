"""Tests for the showcase aggregates."""
import pytest

from money_showcase import (
    AllowedMoneySource,
    ConstructionError,
    FieldError,
    Group,
    Showcase,
    ShowcaseReference,
)
from money_showcase.core.showcase import ReferenceFormat


def _showcase(**overrides):
    fields = {
        "title": "Top-up",
        "hidden_fields": {"scid": "1"},
        "form": Group(),
        "money_sources": frozenset({"wallet"}),
    }
    fields.update(overrides)
    return Showcase(**fields)


@pytest.mark.parametrize("missing", ["title", "hidden_fields", "form", "money_sources", "errors"])
def test_required_fields_fail_loudly(missing):
    with pytest.raises(ConstructionError):
        _showcase(**{missing: None})


def test_form_must_be_a_group():
    with pytest.raises(ConstructionError):
        _showcase(form="not a group")


def test_hidden_fields_are_read_only_copies():
    source = {"scid": "1"}
    showcase = _showcase(hidden_fields=source)
    source["scid"] = "2"

    assert showcase.hidden_fields["scid"] == "1"
    with pytest.raises(TypeError):
        showcase.hidden_fields["scid"] = "3"


def test_equal_showcases_compare_equal():
    assert _showcase() == _showcase(errors=[])
    assert _showcase() != _showcase(title="Other")


def test_known_money_sources_skip_unknown_codes():
    showcase = _showcase(money_sources={"wallet", "payment-card", "crypto"})
    assert showcase.known_money_sources() == frozenset(
        {AllowedMoneySource.WALLET, AllowedMoneySource.PAYMENT_CARD}
    )
    assert "crypto" in showcase.money_sources


def test_field_error_needs_alert():
    with pytest.raises(ConstructionError):
        FieldError(alert="")
    assert FieldError(alert="Bad number", name="phone").name == "phone"


def test_errors_for_filters_by_field():
    errors = [FieldError("Bad number", "phone"), FieldError("Try later"), FieldError("Too small", "sum")]
    showcase = _showcase(errors=errors)
    assert showcase.errors_for("phone") == (errors[0],)
    assert showcase.errors_for(None) == (errors[1],)


def test_references_rank_by_top_index_then_title():
    references = [
        ShowcaseReference(scid=3, title="Zeta"),
        ShowcaseReference(scid=2, title="Beta", top_index=2),
        ShowcaseReference(scid=1, title="Alpha"),
        ShowcaseReference(scid=4, title="Gamma", top_index=1),
    ]
    assert [ref.scid for ref in ShowcaseReference.ranked(references)] == [4, 2, 1, 3]


def test_reference_validation():
    with pytest.raises(ConstructionError):
        ShowcaseReference(scid=1, title="")
    with pytest.raises(ConstructionError):
        ShowcaseReference(scid=1, title="MTS", format=None)
    assert ReferenceFormat.parse(None) is ReferenceFormat.UNKNOWN
