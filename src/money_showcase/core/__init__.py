"""
Core primitives: the form model, its JSON codec and parameter extraction.
"""

from .client import ShowcaseClient, fetch_showcase
from .codec import (
    DEFAULT_REGISTRY,
    ComponentRegistry,
    DecodeContext,
    create_registry,
    decode_component,
    decode_showcase,
    decode_showcase_reference,
    decode_showcase_search,
    encode_component,
    encode_showcase,
    encode_showcase_reference,
    showcase_to_dict,
)
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
from .config import ClientConfig, ClientParameters, load_client_config
from .environment import ClientEnvironment, build_environment, read_env_file
from .errors import (
    ConfigError,
    ConstructionError,
    DecodeError,
    ShowcaseError,
    TransportError,
)
from .extraction import (
    assign_values,
    extract_payment_parameters,
    fill_payment_parameters,
    find_invalid_components,
    iter_parameters,
)
from .showcase import (
    AllowedMoneySource,
    FieldError,
    ReferenceFormat,
    Showcase,
    ShowcaseReference,
)

__all__ = [
    "DEFAULT_REGISTRY",
    "AllowedMoneySource",
    "Amount",
    "AmountType",
    "Checkbox",
    "ClientConfig",
    "ClientEnvironment",
    "ClientParameters",
    "Component",
    "ComponentRegistry",
    "ConfigError",
    "ConstructionError",
    "Date",
    "DecodeContext",
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
    "ReferenceFormat",
    "Select",
    "SelectStyle",
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
    "build_environment",
    "create_registry",
    "decode_component",
    "decode_showcase",
    "decode_showcase_reference",
    "decode_showcase_search",
    "encode_component",
    "encode_showcase",
    "encode_showcase_reference",
    "extract_payment_parameters",
    "fetch_showcase",
    "fill_payment_parameters",
    "find_invalid_components",
    "iter_parameters",
    "load_client_config",
    "read_env_file",
    "showcase_to_dict",
]
