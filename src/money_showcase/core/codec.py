"""
JSON codec for showcases and their form components.

Every component object carries a ``"type"`` discriminator. Decoding looks the
discriminator up in a :class:`ComponentRegistry`; kinds the registry does not
know become :class:`UnknownComponent` placeholders so the rest of the form
stays usable. Encoding is the inverse for every registered kind, and a
placeholder is written back exactly as it was received.
"""

from __future__ import annotations

import copy
import json
import logging
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Type, Union

from .components import (
    Amount,
    AmountType,
    Checkbox,
    Component,
    Date,
    Email,
    Fee,
    Group,
    Layout,
    Month,
    Number,
    Option,
    Parameter,
    Select,
    SelectStyle,
    Submit,
    Tel,
    Text,
    TextArea,
    UnknownComponent,
)
from .errors import ConstructionError, DecodeError
from .showcase import FieldError, ReferenceFormat, Showcase, ShowcaseReference

__all__ = [
    "DEFAULT_REGISTRY",
    "ComponentRegistry",
    "DecodeContext",
    "create_registry",
    "decode_component",
    "decode_showcase",
    "decode_showcase_reference",
    "decode_showcase_search",
    "encode_component",
    "encode_showcase",
    "encode_showcase_reference",
    "showcase_to_dict",
]

JsonInput = Union[bytes, bytearray, str, Mapping[str, Any]]
Decoder = Callable[[Mapping[str, Any], "DecodeContext"], Component]
Encoder = Callable[[Any, "ComponentRegistry"], Dict[str, Any]]


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _json_number(value: Decimal) -> Union[int, float, str]:
    """
    JSON form of a decimal bound.

    Integers and decimals that survive a float round-trip are written as
    numbers. Anything longer is written as a numeric string, which
    :meth:`DecodeContext.decimal` reads back exactly.
    """
    if value == value.to_integral_value():
        return int(value)
    approximation = float(value)
    if Decimal(repr(approximation)) == value:
        return approximation
    return str(value)


def _put(target: Dict[str, Any], key: str, value: Any) -> None:
    if value is not None:
        target[key] = value


class DecodeContext:
    """
    Position of the decoder inside the document.

    Custom decoders receive a context so they can read members with the same
    error reporting as the built-in ones and decode nested components.
    """

    def __init__(
        self,
        registry: "ComponentRegistry",
        path: str = "$",
        kind: Optional[str] = None,
    ) -> None:
        self.registry = registry
        self.path = path
        self.kind = kind

    def child(self, suffix: str) -> "DecodeContext":
        return DecodeContext(self.registry, self.path + suffix)

    def error(self, message: str) -> DecodeError:
        return DecodeError(message, self.path, self.kind)

    def decode(self, obj: Any) -> Component:
        if not isinstance(obj, Mapping):
            raise self.error("component must be a JSON object")
        kind = obj.get("type")
        if not isinstance(kind, str) or not kind:
            raise self.error("component has no 'type'")

        decoder = self.registry.decoder_for(kind)
        if decoder is None:
            logging.warning(
                "Unknown component type %r at %s; keeping it as a placeholder",
                kind,
                self.path,
            )
            return UnknownComponent(type_name=kind, raw=copy.deepcopy(dict(obj)))

        context = DecodeContext(self.registry, self.path, kind)
        try:
            return decoder(obj, context)
        except ConstructionError as exc:
            raise context.error(str(exc)) from exc

    def decode_group(self, obj: Any) -> Group:
        component = self.decode(obj)
        if not isinstance(component, Group):
            raise self.error(f"expected a group, got {component.kind!r}")
        return component

    def string(self, obj: Mapping[str, Any], key: str, *, required: bool = False) -> Optional[str]:
        value = obj.get(key)
        if value is None:
            if required:
                raise self.error(f"'{key}' is required")
            return None
        if not isinstance(value, str):
            raise self.error(f"'{key}' must be a string, got {value!r}")
        return value

    def scalar(self, obj: Mapping[str, Any], key: str) -> Optional[str]:
        value = obj.get(key)
        if value is None:
            return None
        if isinstance(value, (Mapping, list)):
            raise self.error(f"'{key}' must be a scalar, got {value!r}")
        return _stringify(value)

    def boolean(self, obj: Mapping[str, Any], key: str, default: bool) -> bool:
        value = obj.get(key)
        if value is None:
            return default
        if not isinstance(value, bool):
            raise self.error(f"'{key}' must be a boolean, got {value!r}")
        return value

    def integer(self, obj: Mapping[str, Any], key: str, *, required: bool = False) -> Optional[int]:
        value = obj.get(key)
        if value is None:
            if required:
                raise self.error(f"'{key}' is required")
            return None
        if isinstance(value, bool) or not isinstance(value, int):
            raise self.error(f"'{key}' must be an integer, got {value!r}")
        return value

    def decimal(self, obj: Mapping[str, Any], key: str) -> Optional[Decimal]:
        value = obj.get(key)
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, (int, float, str)):
            raise self.error(f"'{key}' must be a number, got {value!r}")
        try:
            number = Decimal(str(value))
        except InvalidOperation as exc:
            raise self.error(f"'{key}' must be a number, got {value!r}") from exc
        if not number.is_finite():
            raise self.error(f"'{key}' must be finite, got {value!r}")
        return number

    def date(self, obj: Mapping[str, Any], key: str, date_type: Type[Date]) -> Optional[date]:
        value = self.string(obj, key)
        if value is None:
            return None
        parsed = date_type.parse(value)
        if parsed is None:
            raise self.error(
                f"'{key}' must match {date_type.date_format!r}, got {value!r}"
            )
        return parsed

    def array(self, obj: Mapping[str, Any], key: str) -> List[Any]:
        value = obj.get(key)
        if value is None:
            return []
        if not isinstance(value, list):
            raise self.error(f"'{key}' must be an array")
        return value

    def string_map(self, value: Any) -> Dict[str, str]:
        if value is None:
            return {}
        if not isinstance(value, Mapping):
            raise self.error("expected a JSON object")
        result: Dict[str, str] = {}
        for key, item in value.items():
            if item is None or isinstance(item, (Mapping, list)):
                raise self.error(f"'{key}' must be a scalar, got {item!r}")
            result[key] = _stringify(item)
        return result


class ComponentRegistry:
    """
    Maps component discriminators to their decoder and encoder.

    Registering an existing kind replaces it, which lets integrators refine a
    built-in kind or teach the codec a kind the server introduced later.
    """

    def __init__(self) -> None:
        self._decoders: Dict[str, Decoder] = {}
        self._encoders: Dict[str, Tuple[Type[Component], Encoder]] = {}

    def register(
        self,
        kind: str,
        component_type: Type[Component],
        decoder: Decoder,
        encoder: Encoder,
    ) -> None:
        if not kind:
            raise ValueError("kind must not be empty")
        self._decoders[kind] = decoder
        self._encoders[kind] = (component_type, encoder)

    def kinds(self) -> Tuple[str, ...]:
        return tuple(self._decoders)

    def decoder_for(self, kind: str) -> Optional[Decoder]:
        return self._decoders.get(kind)

    def copy(self) -> "ComponentRegistry":
        clone = ComponentRegistry()
        clone._decoders.update(self._decoders)
        clone._encoders.update(self._encoders)
        return clone

    def decode(self, obj: Any, path: str = "$") -> Component:
        return DecodeContext(self, path).decode(obj)

    def encode(self, component: Component) -> Dict[str, Any]:
        if isinstance(component, UnknownComponent):
            return copy.deepcopy(component.raw)

        entry = self._encoders.get(component.kind)
        if entry is None or not isinstance(component, entry[0]):
            raise TypeError(f"No encoder registered for {type(component).__name__}")
        _, encoder = entry
        body: Dict[str, Any] = {"type": component.kind}
        body.update(encoder(component, self))
        return body


# -- built-in kinds ---------------------------------------------------------


def _decode_group(obj: Mapping[str, Any], ctx: DecodeContext) -> Group:
    items = [
        ctx.child(f".fields[{index}]").decode(item)
        for index, item in enumerate(ctx.array(obj, "fields"))
    ]
    layout_code = obj.get("layout")
    return Group(
        items=items,
        layout=Layout.parse(layout_code if isinstance(layout_code, str) else None),
        label=ctx.string(obj, "label"),
    )


def _encode_group(group: Group, registry: ComponentRegistry) -> Dict[str, Any]:
    body: Dict[str, Any] = {
        "layout": group.layout.code,
        "fields": [registry.encode(item) for item in group.items],
    }
    _put(body, "label", group.label)
    return body


def _decode_submit(obj: Mapping[str, Any], ctx: DecodeContext) -> Submit:
    return Submit(label=ctx.string(obj, "label"))


def _encode_submit(submit: Submit, registry: ComponentRegistry) -> Dict[str, Any]:
    body: Dict[str, Any] = {}
    _put(body, "label", submit.label)
    return body


def _parameter_fields(obj: Mapping[str, Any], ctx: DecodeContext) -> Dict[str, Any]:
    return {
        "name": ctx.string(obj, "name", required=True),
        "value": ctx.scalar(obj, "value"),
        "required": ctx.boolean(obj, "required", True),
        "readonly": ctx.boolean(obj, "readonly", False),
        "label": ctx.string(obj, "label"),
        "hint": ctx.string(obj, "hint"),
        "alert": ctx.string(obj, "alert"),
        "value_autofill": ctx.string(obj, "value_autofill"),
    }


def _encode_parameter(parameter: Parameter) -> Dict[str, Any]:
    body: Dict[str, Any] = {"name": parameter.name}
    _put(body, "value", parameter.value)
    body["required"] = parameter.required
    body["readonly"] = parameter.readonly
    _put(body, "label", parameter.label)
    _put(body, "hint", parameter.hint)
    _put(body, "alert", parameter.alert)
    _put(body, "value_autofill", parameter.value_autofill)
    return body


def _text_decoder(text_type: Type[TextArea]) -> Decoder:
    def decode(obj: Mapping[str, Any], ctx: DecodeContext) -> Component:
        fields = _parameter_fields(obj, ctx)
        fields["min_length"] = ctx.integer(obj, "minlength")
        fields["max_length"] = ctx.integer(obj, "maxlength")
        if issubclass(text_type, Text):
            fields["pattern"] = ctx.string(obj, "pattern")
        return text_type(**fields)

    return decode


def _encode_text(text: TextArea, registry: ComponentRegistry) -> Dict[str, Any]:
    body = _encode_parameter(text)
    _put(body, "minlength", text.min_length)
    _put(body, "maxlength", text.max_length)
    if isinstance(text, Text):
        _put(body, "pattern", text.pattern)
    return body


def _number_fields(obj: Mapping[str, Any], ctx: DecodeContext) -> Dict[str, Any]:
    fields = _parameter_fields(obj, ctx)
    fields["min"] = ctx.decimal(obj, "min")
    fields["max"] = ctx.decimal(obj, "max")
    fields["step"] = ctx.decimal(obj, "step")
    return fields


def _encode_number_fields(number: Number) -> Dict[str, Any]:
    body = _encode_parameter(number)
    for key in ("min", "max", "step"):
        value = getattr(number, key)
        if value is not None:
            body[key] = _json_number(value)
    return body


def _decode_number(obj: Mapping[str, Any], ctx: DecodeContext) -> Number:
    return Number(**_number_fields(obj, ctx))


def _encode_number(number: Number, registry: ComponentRegistry) -> Dict[str, Any]:
    return _encode_number_fields(number)


def _decode_fee(obj: Any, ctx: DecodeContext) -> Fee:
    if not isinstance(obj, Mapping):
        raise ctx.error("fee must be a JSON object")
    return Fee(
        a=ctx.decimal(obj, "a") or Decimal(0),
        b=ctx.decimal(obj, "b") or Decimal(0),
        c=ctx.decimal(obj, "c"),
        d=ctx.decimal(obj, "d"),
        amount_type=AmountType.parse(ctx.string(obj, "amount_type")),
    )


def _encode_fee(fee: Fee) -> Dict[str, Any]:
    body: Dict[str, Any] = {
        "a": _json_number(fee.a),
        "b": _json_number(fee.b),
        "amount_type": fee.amount_type.value,
    }
    if fee.c is not None:
        body["c"] = _json_number(fee.c)
    if fee.d is not None:
        body["d"] = _json_number(fee.d)
    return body


def _decode_amount(obj: Mapping[str, Any], ctx: DecodeContext) -> Amount:
    fields = _number_fields(obj, ctx)
    # a missing step keeps the kopeck default, an explicit null removes it
    if "step" not in obj:
        del fields["step"]
    fields["currency"] = ctx.string(obj, "currency") or "RUB"
    fee = obj.get("fee")
    fields["fee"] = _decode_fee(fee, ctx.child(".fee")) if fee is not None else None
    return Amount(**fields)


def _encode_amount(amount: Amount, registry: ComponentRegistry) -> Dict[str, Any]:
    body = _encode_number_fields(amount)
    body["step"] = _json_number(amount.step) if amount.step is not None else None
    body["currency"] = amount.currency
    if amount.fee is not None:
        body["fee"] = _encode_fee(amount.fee)
    return body


def _date_decoder(date_type: Type[Date]) -> Decoder:
    def decode(obj: Mapping[str, Any], ctx: DecodeContext) -> Component:
        fields = _parameter_fields(obj, ctx)
        fields["min"] = ctx.date(obj, "min", date_type)
        fields["max"] = ctx.date(obj, "max", date_type)
        return date_type(**fields)

    return decode


def _encode_date(control: Date, registry: ComponentRegistry) -> Dict[str, Any]:
    body = _encode_parameter(control)
    if control.min is not None:
        body["min"] = control.format(control.min)
    if control.max is not None:
        body["max"] = control.format(control.max)
    return body


def _decode_checkbox(obj: Mapping[str, Any], ctx: DecodeContext) -> Checkbox:
    return Checkbox(
        checked=ctx.boolean(obj, "checked", False),
        **_parameter_fields(obj, ctx),
    )


def _encode_checkbox(checkbox: Checkbox, registry: ComponentRegistry) -> Dict[str, Any]:
    body = _encode_parameter(checkbox)
    body["checked"] = checkbox.checked
    return body


def _decode_option(obj: Any, ctx: DecodeContext) -> Option:
    if not isinstance(obj, Mapping):
        raise ctx.error("option must be a JSON object")
    group = obj.get("group")
    try:
        return Option(
            label=ctx.string(obj, "label", required=True),
            value=ctx.scalar(obj, "value"),
            group=ctx.child(".group").decode_group(group) if group is not None else None,
        )
    except ConstructionError as exc:
        raise ctx.error(str(exc)) from exc


def _decode_select(obj: Mapping[str, Any], ctx: DecodeContext) -> Select:
    options = [
        _decode_option(item, ctx.child(f".options[{index}]"))
        for index, item in enumerate(ctx.array(obj, "options"))
    ]
    return Select(
        options=options,
        style=SelectStyle.parse(ctx.string(obj, "style")),
        **_parameter_fields(obj, ctx),
    )


def _encode_option(option: Option, registry: ComponentRegistry) -> Dict[str, Any]:
    body: Dict[str, Any] = {"label": option.label, "value": option.value}
    if option.group is not None:
        body["group"] = registry.encode(option.group)
    return body


def _encode_select(select: Select, registry: ComponentRegistry) -> Dict[str, Any]:
    body = _encode_parameter(select)
    body["style"] = select.style.value
    body["options"] = [_encode_option(option, registry) for option in select.options]
    return body


def create_registry() -> ComponentRegistry:
    """Return a new registry populated with every built-in component kind."""
    registry = ComponentRegistry()
    registry.register("group", Group, _decode_group, _encode_group)
    registry.register("submit", Submit, _decode_submit, _encode_submit)
    registry.register("textarea", TextArea, _text_decoder(TextArea), _encode_text)
    registry.register("text", Text, _text_decoder(Text), _encode_text)
    registry.register("email", Email, _text_decoder(Email), _encode_text)
    registry.register("tel", Tel, _text_decoder(Tel), _encode_text)
    registry.register("number", Number, _decode_number, _encode_number)
    registry.register("amount", Amount, _decode_amount, _encode_amount)
    registry.register("date", Date, _date_decoder(Date), _encode_date)
    registry.register("month", Month, _date_decoder(Month), _encode_date)
    registry.register("checkbox", Checkbox, _decode_checkbox, _encode_checkbox)
    registry.register("select", Select, _decode_select, _encode_select)
    return registry


DEFAULT_REGISTRY = create_registry()


def decode_component(obj: Any, *, registry: Optional[ComponentRegistry] = None) -> Component:
    return (registry or DEFAULT_REGISTRY).decode(obj)


def encode_component(
    component: Component, *, registry: Optional[ComponentRegistry] = None
) -> Dict[str, Any]:
    return (registry or DEFAULT_REGISTRY).encode(component)


# -- showcase documents -----------------------------------------------------


def _load_document(data: JsonInput) -> Any:
    if isinstance(data, Mapping):
        return data
    try:
        return json.loads(data)
    except (ValueError, UnicodeDecodeError) as exc:
        raise DecodeError(f"invalid JSON: {exc}") from exc


def _decode_form(value: Any, ctx: DecodeContext) -> Group:
    if value is None:
        raise ctx.error("'form' is required")
    if isinstance(value, list):
        # bare list of components, laid out vertically
        return Group(items=[ctx.child(f"[{index}]").decode(item) for index, item in enumerate(value)])
    return ctx.decode_group(value)


def _decode_money_sources(value: Any, ctx: DecodeContext) -> List[str]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ctx.error("money sources must be an array of strings")
    return list(value)


def _decode_field_error(obj: Any, ctx: DecodeContext) -> FieldError:
    if not isinstance(obj, Mapping):
        raise ctx.error("error must be a JSON object")
    alert = ctx.string(obj, "alert", required=True)
    try:
        return FieldError(alert=alert, name=ctx.string(obj, "name"))
    except ConstructionError as exc:
        raise ctx.error(str(exc)) from exc


def _decode_field_errors(value: Any, ctx: DecodeContext) -> List[FieldError]:
    if value is None:
        return []
    if isinstance(value, Mapping):
        return [_decode_field_error(value, ctx)]
    if not isinstance(value, list):
        raise ctx.error("'error' must be an object or an array")
    return [
        _decode_field_error(item, ctx.child(f"[{index}]"))
        for index, item in enumerate(value)
    ]


def decode_showcase(
    data: JsonInput, *, registry: Optional[ComponentRegistry] = None
) -> Showcase:
    """
    Decode a showcase from JSON bytes, text or an already parsed mapping.

    Raises :class:`DecodeError` when the document is not JSON, when ``title``
    or ``form`` is missing or malformed, or when a known component is
    malformed. Unknown component kinds never fail the decode.
    """
    document = _load_document(data)
    ctx = DecodeContext(registry or DEFAULT_REGISTRY)
    if not isinstance(document, Mapping):
        raise ctx.error("showcase must be a JSON object")

    title = ctx.string(document, "title", required=True)
    form = _decode_form(document.get("form"), ctx.child(".form"))
    hidden_fields = ctx.child(".hidden_fields").string_map(document.get("hidden_fields"))
    sources_key = "money_sources" if "money_sources" in document else "money_source"
    money_sources = _decode_money_sources(
        document.get(sources_key), ctx.child("." + sources_key)
    )
    errors = _decode_field_errors(document.get("error"), ctx.child(".error"))

    logging.debug(
        "Decoded showcase %r with %d top-level components", title, len(form.items)
    )
    try:
        return Showcase(
            title=title,
            hidden_fields=hidden_fields,
            form=form,
            money_sources=frozenset(money_sources),
            errors=tuple(errors),
        )
    except ConstructionError as exc:
        raise ctx.error(str(exc)) from exc


def showcase_to_dict(
    showcase: Showcase, *, registry: Optional[ComponentRegistry] = None
) -> Dict[str, Any]:
    registry = registry or DEFAULT_REGISTRY
    errors: List[Dict[str, Any]] = []
    for error in showcase.errors:
        body: Dict[str, Any] = {"alert": error.alert}
        _put(body, "name", error.name)
        errors.append(body)
    return {
        "title": showcase.title,
        "hidden_fields": dict(showcase.hidden_fields),
        "form": registry.encode(showcase.form),
        "money_sources": sorted(showcase.money_sources),
        "error": errors,
    }


def encode_showcase(
    showcase: Showcase, *, registry: Optional[ComponentRegistry] = None
) -> bytes:
    """Encode ``showcase`` as UTF-8 JSON; :func:`decode_showcase` reverses it."""
    document = showcase_to_dict(showcase, registry=registry)
    return json.dumps(document, ensure_ascii=False).encode("utf-8")


# -- showcase search --------------------------------------------------------


def decode_showcase_reference(obj: Any, path: str = "$") -> ShowcaseReference:
    ctx = DecodeContext(DEFAULT_REGISTRY, path)
    if not isinstance(obj, Mapping):
        raise ctx.error("showcase reference must be a JSON object")
    try:
        return ShowcaseReference(
            scid=ctx.integer(obj, "id", required=True),
            title=ctx.string(obj, "title", required=True),
            format=ReferenceFormat.parse(ctx.string(obj, "format")),
            top_index=ctx.integer(obj, "top"),
            url=ctx.string(obj, "url"),
            params=ctx.child(".params").string_map(obj.get("params")),
        )
    except ConstructionError as exc:
        raise ctx.error(str(exc)) from exc


def encode_showcase_reference(reference: ShowcaseReference) -> Dict[str, Any]:
    body: Dict[str, Any] = {
        "id": reference.scid,
        "title": reference.title,
        "format": reference.format.value,
    }
    _put(body, "top", reference.top_index)
    _put(body, "url", reference.url)
    if reference.params:
        body["params"] = dict(reference.params)
    return body


def decode_showcase_search(data: JsonInput) -> List[ShowcaseReference]:
    """Decode the ``result`` array of a showcase search response."""
    document = _load_document(data)
    if not isinstance(document, Mapping):
        raise DecodeError("search response must be a JSON object")
    result = document.get("result")
    if result is None:
        return []
    if not isinstance(result, list):
        raise DecodeError("'result' must be an array", "$.result")
    return [
        decode_showcase_reference(item, f"$.result[{index}]")
        for index, item in enumerate(result)
    ]
