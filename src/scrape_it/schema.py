"""
Schema module for scrape_it.

Turns raw field definitions (a bare selector string or a partial options
mapping) into validated FieldDescriptor models with defaults filled in.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from .dom import Selection
from .errors import ConfigurationError, INVALID_FIELD, UNKNOWN_ACCESSOR

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuiltinAccessor:
    """Named accessor provided by Selection (``text``, ``html``, ...)."""
    name: str


@dataclass(frozen=True)
class CustomAccessor:
    """User function called with the resolved selection."""
    func: Callable[[Selection], Any]


@dataclass(frozen=True)
class AttributeAccessor:
    """Reads one attribute of the first selected element."""
    attribute: str


@dataclass(frozen=True)
class TextNodeAccessor:
    """Reads the raw content of a selected text node."""


Accessor = Union[BuiltinAccessor, CustomAccessor, AttributeAccessor, TextNodeAccessor]


class FieldKind(str, Enum):
    """Shape of the value a field produces."""
    SCALAR = "scalar"
    NESTED = "nested"
    LIST = "list"
    SCALAR_LIST = "scalar_list"


class FieldDescriptor(BaseModel):
    """Canonical description of one schema field."""
    name: str = ""
    selector: Optional[str] = None
    list_item: Optional[str] = Field(None, validation_alias=AliasChoices("listItem", "list_item"))
    data: Dict[str, Any] = Field(default_factory=dict)
    how: Union[str, Callable[..., Any]] = "text"
    attr: Optional[str] = None
    trim_value: bool = Field(True, validation_alias=AliasChoices("trimValue", "trim_value", "trim"))
    closest: str = ""
    eq: Optional[int] = None
    texteq: Optional[int] = Field(None, ge=0)
    convert: Optional[Callable[..., Any]] = None

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @property
    def kind(self) -> FieldKind:
        if self.list_item:
            return FieldKind.LIST if self.data else FieldKind.SCALAR_LIST
        if self.data:
            return FieldKind.NESTED
        return FieldKind.SCALAR

    @property
    def accessor(self) -> Accessor:
        """
        Accessor for scalar reads.

        ``attr`` always wins over ``how``. The text-node override for
        ``texteq`` is applied by the extractor once the node is resolved.
        """
        if self.attr:
            return AttributeAccessor(self.attr)
        if callable(self.how):
            return CustomAccessor(self.how)
        return BuiltinAccessor(self.how)

    @property
    def is_scoped(self) -> bool:
        return bool(self.selector or self.list_item)


RawField = Union[str, Mapping[str, Any], FieldDescriptor]
Schema = Mapping[str, RawField]


def normalize_field(raw: RawField, name: str = "") -> FieldDescriptor:
    """
    Build a FieldDescriptor from a raw field definition.

    Args:
        raw: Selector string, options mapping or an existing descriptor
        name: Field name assigned by the parent schema

    Returns:
        A new descriptor; ``raw`` is never modified

    Raises:
        ConfigurationError: If the definition is malformed
    """
    if isinstance(raw, FieldDescriptor):
        return raw.model_copy(update={"name": name or raw.name})

    if isinstance(raw, str):
        raw = {"selector": raw}

    if not isinstance(raw, Mapping):
        raise ConfigurationError(
            f"Invalid definition for the '{name}' field: expected a selector string or a mapping, "
            f"got {type(raw).__name__}.",
            code=INVALID_FIELD,
            option=raw,
        )

    # None behaves as "not provided" so defaults still apply
    options = {key: value for key, value in raw.items() if value is not None}
    options["name"] = name

    try:
        descriptor = FieldDescriptor.model_validate(options)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid definition for the '{name}' field: {e}",
            code=INVALID_FIELD,
            option=raw,
        ) from e

    # Only scalar fields read through an accessor
    accessor = descriptor.accessor
    if (
        descriptor.kind is FieldKind.SCALAR
        and isinstance(accessor, BuiltinAccessor)
        and descriptor.texteq is None
        and accessor.name not in Selection.ACCESSORS
    ):
        raise ConfigurationError(
            f"Unknown accessor '{accessor.name}' for the '{name}' field. "
            f"Use one of: {', '.join(sorted(Selection.ACCESSORS))} or a function.",
            code=UNKNOWN_ACCESSOR,
            option=descriptor,
        )

    return descriptor


def item_descriptor(name: str = "") -> FieldDescriptor:
    """Default scalar descriptor used for items of a scalar list."""
    return FieldDescriptor(name=name)
