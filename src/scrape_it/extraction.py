"""
Extraction module for scrape_it.

Walks a schema recursively and reads each field from the document: scalar
fields through an accessor, nested fields as records, list fields once per
matched item.
"""

import logging
from typing import Any, Dict, List, Tuple, Union

from bs4.element import PageElement

from .dom import Markup, Selection, parse
from .errors import ConfigurationError, NO_ELEMENT_SELECTED
from .schema import (
    Accessor,
    AttributeAccessor,
    BuiltinAccessor,
    CustomAccessor,
    FieldDescriptor,
    FieldKind,
    Schema,
    TextNodeAccessor,
    item_descriptor,
    normalize_field,
)

logger = logging.getLogger(__name__)

Document = Union[Markup, PageElement, Selection]


def read_value(accessor: Accessor, element: Selection) -> Any:
    """Obtain the raw value of ``element`` through ``accessor``."""
    if isinstance(accessor, CustomAccessor):
        return accessor.func(element)
    if isinstance(accessor, AttributeAccessor):
        return element.attr(accessor.attribute)
    if isinstance(accessor, TextNodeAccessor):
        return element.data()
    if isinstance(accessor, BuiltinAccessor):
        return element.read(accessor.name)
    raise TypeError(f"Unsupported accessor: {accessor!r}")


class SchemaExtractor:
    """Extracts structured records from a document using a selector schema."""

    def extract(self, document: Document, schema: Schema) -> Dict[str, Any]:
        """
        Extract structured data from a document.

        Args:
            document: Markup to parse, or an already parsed document/selection
            schema: Mapping of field names to field definitions

        Returns:
            Extracted record with one key per schema field

        Raises:
            ConfigurationError: If a top level field selects nothing
        """
        if isinstance(document, (str, bytes)):
            document = parse(document)
        root = Selection.of(document)
        logger.debug(f"Extracting {len(schema)} top level fields")
        return self._extract_record(schema, root, is_root=True)

    def _extract_record(self, schema: Schema, context: Selection, is_root: bool) -> Dict[str, Any]:
        record: Dict[str, Any] = {}

        for name, raw in schema.items():
            descriptor = normalize_field(raw, name)

            if is_root and not descriptor.is_scoped:
                raise ConfigurationError(
                    f"There is no element selected for the '{name}' field. "
                    "Please provide a selector, list item or use nested object structure.",
                    code=NO_ELEMENT_SELECTED,
                    option=descriptor,
                )

            scope = context.find(descriptor.selector) if descriptor.selector else context
            kind = descriptor.kind

            if kind in (FieldKind.LIST, FieldKind.SCALAR_LIST):
                record[name] = self._extract_list(descriptor, scope)
            elif kind is FieldKind.NESTED:
                element, _ = self._narrow(descriptor, scope)
                record[name] = self._extract_record(descriptor.data, element, is_root=False)
            else:
                record[name] = self._extract_scalar(descriptor, scope)

        return record

    def _extract_list(self, descriptor: FieldDescriptor, scope: Selection) -> List[Any]:
        items = scope.find(descriptor.list_item)
        logger.debug(f"Field '{descriptor.name}' matched {len(items)} list items")

        values = []
        for item in items.each():
            if descriptor.kind is FieldKind.SCALAR_LIST:
                value = self._extract_scalar(item_descriptor(descriptor.name), item)
            else:
                value = self._extract_record(descriptor.data, item, is_root=False)

            if descriptor.convert is not None:
                value = descriptor.convert(value)
            values.append(value)

        return values

    def _extract_scalar(self, descriptor: FieldDescriptor, element: Selection) -> Any:
        element, text_node = self._narrow(descriptor, element)
        accessor = TextNodeAccessor() if text_node else descriptor.accessor

        value = read_value(accessor, element)
        if value is None:
            value = ""

        if descriptor.trim_value and isinstance(value, str):
            value = value.strip()

        if descriptor.convert is not None:
            value = descriptor.convert(value, element)

        return value

    def _narrow(self, descriptor: FieldDescriptor, element: Selection) -> Tuple[Selection, bool]:
        """
        Apply ``eq``, ``texteq`` and ``closest`` in that order.

        Returns:
            The narrowed selection and whether it was narrowed to a text node
        """
        text_node = False

        if descriptor.eq is not None:
            element = element.eq(descriptor.eq)

        if descriptor.texteq is not None:
            element = element.text_nodes().eq(descriptor.texteq)
            text_node = True

        if descriptor.closest:
            element = element.closest(descriptor.closest)

        return element, text_node


def scrape_html(document: Document, schema: Schema) -> Dict[str, Any]:
    """
    Scrape structured data from markup or a parsed document.

    Args:
        document: HTML string/bytes, a BeautifulSoup document or a Selection
        schema: Mapping of field names to field definitions

    Returns:
        The extracted data
    """
    return SchemaExtractor().extract(document, schema)
