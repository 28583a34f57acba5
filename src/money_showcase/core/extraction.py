"""
Walks over a showcase form: parameter extraction, lookup and value assignment.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Iterator, List, Mapping, MutableMapping, Set

from .components import Component, Group, Parameter, Select, UnknownComponent

if TYPE_CHECKING:
    from .showcase import Showcase

__all__ = [
    "assign_values",
    "extract_payment_parameters",
    "fill_payment_parameters",
    "find_invalid_components",
    "iter_parameters",
]


def extract_payment_parameters(showcase: "Showcase") -> Dict[str, str]:
    """
    Build the key-value pairs to submit for ``showcase``.

    Hidden fields come first, then every parameter reachable from the form:
    plain groups are always entered, a select's option group only when that
    option is selected. Later parameters overwrite earlier ones with the same
    name. An unset value is submitted as an empty string.
    """
    parameters: Dict[str, str] = dict(showcase.hidden_fields)
    fill_payment_parameters(parameters, showcase.form)
    return parameters


def fill_payment_parameters(parameters: MutableMapping[str, str], group: Group) -> None:
    for component in group.items:
        if isinstance(component, Group):
            fill_payment_parameters(parameters, component)
        elif isinstance(component, Parameter):
            parameters[component.name] = component.value if component.value is not None else ""
            if isinstance(component, Select):
                option = component.selected_option
                if option is not None and option.group is not None:
                    fill_payment_parameters(parameters, option.group)


def iter_parameters(group: Group) -> Iterator[Parameter]:
    """Yield every parameter in ``group``, including those behind unselected options."""
    for component in group.items:
        if isinstance(component, Group):
            yield from iter_parameters(component)
        elif isinstance(component, Parameter):
            yield component
            if isinstance(component, Select):
                for option in component.options:
                    if option.group is not None:
                        yield from iter_parameters(option.group)


def find_invalid_components(group: Group) -> List[Component]:
    """Leaves that make ``group.is_valid()`` fail, in traversal order."""
    invalid: List[Component] = []
    for component in group.items:
        if isinstance(component, Group):
            invalid.extend(find_invalid_components(component))
        elif isinstance(component, Parameter):
            if not component.is_valid_value(component.value):
                invalid.append(component)
            if isinstance(component, Select):
                for option in component.options:
                    if option.group is not None:
                        invalid.extend(find_invalid_components(option.group))
        elif isinstance(component, UnknownComponent):
            invalid.append(component)
    return invalid


def assign_values(group: Group, values: Mapping[str, str]) -> Set[str]:
    """
    Set the value of every parameter whose name appears in ``values``.

    Returns the names that did not match any parameter.
    """
    unmatched = set(values)
    for parameter in iter_parameters(group):
        if parameter.name in values:
            parameter.value = values[parameter.name]
            unmatched.discard(parameter.name)
    return unmatched
