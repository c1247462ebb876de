"""Building blocks shared by every element codec.

A codec turns one element tag into a model instance and back. It only ever
touches the tag's own properties; the paired ``hashTree`` holding its children
belongs to the parser and serializer.
"""
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Type

from .model import Argument, JMXComponent
from .properties import (
    add_collection_prop,
    add_element_prop,
    add_string_prop,
    get_collection_elements,
    get_string_prop,
)

COMMENTS_PROP = "TestPlan.comments"


@dataclass(frozen=True)
class Codec:
    type: str
    model: Type[JMXComponent]
    decode: Callable[[ET.Element], JMXComponent]
    encode: Callable[[JMXComponent], ET.Element]
    category: str


def discriminator(node: ET.Element) -> str:
    """The element kind: its testclass, or the tag name when testclass is missing"""
    return node.get("testclass") or node.tag


def decode_component(node: ET.Element, model: Type[JMXComponent], **fields: Any) -> JMXComponent:
    """Create ``model`` from the node's common attributes plus kind-specific fields.

    Fields passed as None were absent from the file and take the model default.
    """
    values = {
        "type": discriminator(node),
        "gui_class": node.get("guiclass"),
        "name": node.get("testname"),
        "enabled": node.get("enabled", "true").strip().lower() != "false",
        "comments": get_string_prop(node, COMMENTS_PROP),
    }
    values.update(fields)
    return model(**{key: value for key, value in values.items() if value is not None})


def open_node(element: JMXComponent) -> ET.Element:
    """Start the element tag with the attributes every JMeter element carries"""
    node = ET.Element(
        element.type,
        guiclass=element.gui_class,
        testclass=element.type,
        testname=element.name,
        enabled="true" if element.enabled else "false",
    )
    add_string_prop(node, COMMENTS_PROP, element.comments)
    return node


# --- Arguments (name/value lists nested as elementProp) ---

def decode_argument(node: ET.Element) -> Argument:
    values = {
        "name": get_string_prop(node, "Argument.name"),
        "value": get_string_prop(node, "Argument.value"),
        "metadata": get_string_prop(node, "Argument.metadata"),
    }
    if values["name"] is None:
        values["name"] = node.get("name")
    return Argument(**{key: value for key, value in values.items() if value is not None})


def decode_arguments(node: Optional[ET.Element]) -> List[Argument]:
    """Read the ``Arguments.arguments`` collection of an Arguments element or elementProp"""
    if node is None:
        return []
    return [decode_argument(entry) for entry in get_collection_elements(node, "Arguments.arguments")]


def encode_arguments(collection_owner: ET.Element, arguments: List[Argument]) -> ET.Element:
    collection = add_collection_prop(collection_owner, "Arguments.arguments")
    for argument in arguments:
        entry = add_element_prop(collection, argument.name, "Argument")
        add_string_prop(entry, "Argument.name", argument.name)
        add_string_prop(entry, "Argument.value", argument.value)
        add_string_prop(entry, "Argument.metadata", argument.metadata)
    return collection


def add_arguments_prop(node: ET.Element, name: str, arguments: List[Argument], gui_class: str = "ArgumentsPanel") -> ET.Element:
    """Write a nested User Defined Variables block, the shape JMeter's own writer uses"""
    holder = add_element_prop(
        node,
        name,
        "Arguments",
        guiclass=gui_class,
        testclass="Arguments",
        testname="User Defined Variables",
        enabled="true",
    )
    encode_arguments(holder, arguments)
    return holder
