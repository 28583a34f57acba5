"""
Public facade for the showcase form package.

The most useful pieces are re-exported so integrators can
``from money_showcase import ...`` without navigating the package.
"""

from .api import create_showcase_client, fetch_showcase
from .core import (
    AllowedMoneySource,
    Amount,
    Checkbox,
    ClientConfig,
    ClientParameters,
    Component,
    ComponentRegistry,
    ConfigError,
    ConstructionError,
    Date,
    DecodeError,
    Email,
    Fee,
    FieldError,
    Group,
    Layout,
    Month,
    Number,
    Option,
    Parameter,
    Select,
    Showcase,
    ShowcaseClient,
    ShowcaseError,
    ShowcaseReference,
    Submit,
    Tel,
    Text,
    TextArea,
    TransportError,
    UnknownComponent,
    assign_values,
    create_registry,
    decode_component,
    decode_showcase,
    encode_component,
    encode_showcase,
    extract_payment_parameters,
    load_client_config,
)

__all__ = (
    "AllowedMoneySource",
    "Amount",
    "Checkbox",
    "ClientConfig",
    "ClientParameters",
    "Component",
    "ComponentRegistry",
    "ConfigError",
    "ConstructionError",
    "Date",
    "DecodeError",
    "Email",
    "Fee",
    "FieldError",
    "Group",
    "Layout",
    "Month",
    "Number",
    "Option",
    "Parameter",
    "Select",
    "Showcase",
    "ShowcaseClient",
    "ShowcaseError",
    "ShowcaseReference",
    "Submit",
    "Tel",
    "Text",
    "TextArea",
    "TransportError",
    "UnknownComponent",
    "assign_values",
    "create_registry",
    "create_showcase_client",
    "decode_component",
    "decode_showcase",
    "encode_component",
    "encode_showcase",
    "extract_payment_parameters",
    "fetch_showcase",
    "load_client_config",
)
