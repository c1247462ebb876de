"""Typed access to JMeter property tags.

A JMeter element stores its settings as direct children such as
``<stringProp name="HTTPSampler.path">/ping</stringProp>``. The getters here read
them by name and never raise on bad data: a missing or malformed property reads
as ``None`` (or ``False``/``[]``) and the caller decides the default. The setters
write the same shapes back and skip ``None`` entirely, so omission is how an
absent value is encoded.
"""
import xml.etree.ElementTree as ET
from typing import Iterable, List, Optional

from .model import Expression, IntOrExpression

STRING_PROP = "stringProp"
INT_PROP = "intProp"
LONG_PROP = "longProp"
BOOL_PROP = "boolProp"
DOUBLE_PROP = "doubleProp"
ELEMENT_PROP = "elementProp"
COLLECTION_PROP = "collectionProp"


def find_prop(node: ET.Element, tag: str, name: str) -> Optional[ET.Element]:
    """Return the direct child property ``<tag name="name">`` of ``node``"""
    for child in node:
        if child.tag == tag and child.get("name") == name:
            return child
    return None


def _prop_text(node: ET.Element, tag: str, name: str) -> Optional[str]:
    prop = find_prop(node, tag, name)
    if prop is None:
        return None
    return prop.text or ""


def get_string_prop(node: ET.Element, name: str) -> Optional[str]:
    return _prop_text(node, STRING_PROP, name)


def _parse_int(text: Optional[str]) -> Optional[int]:
    if text is None:
        return None
    try:
        return int(text.strip())
    except ValueError:
        return None


def get_int_prop(node: ET.Element, name: str) -> Optional[int]:
    return _parse_int(_prop_text(node, INT_PROP, name))


def get_long_prop(node: ET.Element, name: str) -> Optional[int]:
    return _parse_int(_prop_text(node, LONG_PROP, name))


def parse_int_or_expression(text: Optional[str]) -> Optional[IntOrExpression]:
    """Read text as an integer, keeping anything else verbatim as an Expression.

    Blank text counts as absent.
    """
    if text is None or not text.strip():
        return None
    if "${" in text:
        return Expression(text=text)
    value = _parse_int(text)
    if value is None:
        return Expression(text=text)
    return value


def get_int_or_expression(node: ET.Element, name: str) -> Optional[IntOrExpression]:
    """Read a value JMeter may store as ``intProp`` or as a templated ``stringProp``"""
    text = _prop_text(node, INT_PROP, name)
    if text is None:
        text = _prop_text(node, STRING_PROP, name)
    return parse_int_or_expression(text)


def find_bool_prop(node: ET.Element, name: str) -> Optional[bool]:
    text = _prop_text(node, BOOL_PROP, name)
    if text is None:
        return None
    return text.strip().lower() == "true"


def get_bool_prop(node: ET.Element, name: str, default: bool = False) -> bool:
    value = find_bool_prop(node, name)
    return default if value is None else value


def get_double_prop(node: ET.Element, name: str) -> Optional[float]:
    """Read ``<doubleProp><name>..</name><value>..</value></doubleProp>``"""
    for child in node:
        if child.tag != DOUBLE_PROP:
            continue
        if (child.findtext("name") or child.get("name")) != name:
            continue
        try:
            return float((child.findtext("value") or "").strip())
        except ValueError:
            return None
    return None


def find_element_prop(
    node: ET.Element, name: Optional[str] = None, element_type: Optional[str] = None
) -> Optional[ET.Element]:
    """Locate a nested ``elementProp`` by its property name or by its ``elementType``"""
    for child in node:
        if child.tag != ELEMENT_PROP:
            continue
        if name is not None and child.get("name") != name:
            continue
        if element_type is not None and child.get("elementType") != element_type:
            continue
        return child
    return None


def get_collection_elements(node: ET.Element, name: str) -> List[ET.Element]:
    collection = find_prop(node, COLLECTION_PROP, name)
    if collection is None:
        return []
    return [child for child in collection if child.tag == ELEMENT_PROP]


def get_string_collection(node: ET.Element, name: str) -> List[str]:
    collection = find_prop(node, COLLECTION_PROP, name)
    if collection is None:
        return []
    return [child.text or "" for child in collection if child.tag == STRING_PROP]


# --- setters ---

def _add_prop(node: ET.Element, tag: str, name: str, text: str) -> ET.Element:
    prop = ET.SubElement(node, tag, name=name)
    prop.text = text
    return prop


def add_string_prop(node: ET.Element, name: str, value: Optional[str]) -> None:
    if value is not None:
        _add_prop(node, STRING_PROP, name, value)


def add_int_prop(node: ET.Element, name: str, value: Optional[int]) -> None:
    if value is not None:
        _add_prop(node, INT_PROP, name, str(value))


def add_long_prop(node: ET.Element, name: str, value: Optional[int]) -> None:
    if value is not None:
        _add_prop(node, LONG_PROP, name, str(value))


def add_bool_prop(node: ET.Element, name: str, value: Optional[bool]) -> None:
    if value is not None:
        _add_prop(node, BOOL_PROP, name, "true" if value else "false")


def add_double_prop(node: ET.Element, name: str, value: Optional[float]) -> None:
    if value is None:
        return
    prop = ET.SubElement(node, DOUBLE_PROP)
    text = repr(float(value))
    ET.SubElement(prop, "name").text = name
    ET.SubElement(prop, "value").text = text
    ET.SubElement(prop, "savedValue").text = text


def add_int_or_expression(
    node: ET.Element, name: str, value: Optional[IntOrExpression], int_tag: str = STRING_PROP
) -> None:
    """Write an integer under ``int_tag``; an Expression always goes out as a stringProp"""
    if value is None:
        return
    if isinstance(value, Expression):
        _add_prop(node, STRING_PROP, name, value.text)
    else:
        _add_prop(node, int_tag, name, str(value))


def add_element_prop(node: ET.Element, name: str, element_type: str, **attrs: str) -> ET.Element:
    return ET.SubElement(node, ELEMENT_PROP, name=name, elementType=element_type, **attrs)


def add_collection_prop(node: ET.Element, name: str) -> ET.Element:
    return ET.SubElement(node, COLLECTION_PROP, name=name)


def java_string_hash(value: str) -> int:
    """``String.hashCode()`` as the JVM computes it, over UTF-16 code units"""
    units = value.encode("utf-16-be")
    result = 0
    for i in range(0, len(units), 2):
        result = (31 * result + ((units[i] << 8) | units[i + 1])) & 0xFFFFFFFF
    if result & 0x80000000:
        result -= 1 << 32
    return result


def add_string_collection(node: ET.Element, name: str, values: Iterable[str]) -> ET.Element:
    """Write a collectionProp of strings, each entry named after its hash like JMeter does"""
    collection = add_collection_prop(node, name)
    for value in values:
        _add_prop(collection, STRING_PROP, str(java_string_hash(value)), value)
    return collection
