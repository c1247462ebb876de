"""Post-processors that pull values out of a response into variables."""
import xml.etree.ElementTree as ET
from typing import Literal, Optional

from ..core.codec import Codec, decode_component, open_node
from ..core.model import IntOrExpression, JMXComponent
from ..core.properties import (
    add_bool_prop,
    add_int_or_expression,
    add_string_prop,
    find_bool_prop,
    get_int_or_expression,
    get_string_prop,
)

# Which part of the response an extractor reads
FIELD_OPTIONS = ("false", "true", "unescaped", "as_document", "request_headers", "code", "message", "URL")

# match_number: 0 picks a random match, -1 keeps every match, n keeps the n-th
MATCH_RANDOM = 0
MATCH_ALL = -1


class ScopedExtractor(JMXComponent):
    scope: Optional[str] = None
    scope_variable: Optional[str] = None
    default_value: str = ""
    match_number: IntOrExpression = 1


def _scope_fields(elem: ET.Element) -> dict:
    return {
        "scope": get_string_prop(elem, "Sample.scope"),
        "scope_variable": get_string_prop(elem, "Scope.variable"),
    }


def _add_scope(elem: ET.Element, component: ScopedExtractor) -> None:
    add_string_prop(elem, "Sample.scope", component.scope)
    add_string_prop(elem, "Scope.variable", component.scope_variable)


def _get_field_to_check(elem: ET.Element, name: str) -> Optional[str]:
    # JMeter stores this as a string option; older generators wrote a boolProp
    value = get_string_prop(elem, name)
    if value is None:
        flag = find_bool_prop(elem, name)
        if flag is not None:
            value = "true" if flag else "false"
    return value or None


# --- Regular Expression Extractor ---

class RegexExtractor(ScopedExtractor):
    type: Literal["RegexExtractor"] = "RegexExtractor"
    gui_class: str = "RegexExtractorGui"
    name: str = "Regular Expression Extractor"
    ref_name: str = ""
    regex: str = ""
    template: str = "$1$"
    use_headers: str = "false"
    default_empty_value: bool = False


def parse_regex_extractor_element(elem: ET.Element) -> RegexExtractor:
    return decode_component(
        elem,
        RegexExtractor,
        ref_name=get_string_prop(elem, "RegexExtractor.refname"),
        regex=get_string_prop(elem, "RegexExtractor.regex"),
        template=get_string_prop(elem, "RegexExtractor.template"),
        default_value=get_string_prop(elem, "RegexExtractor.default"),
        match_number=get_int_or_expression(elem, "RegexExtractor.match_number"),
        use_headers=_get_field_to_check(elem, "RegexExtractor.useHeaders"),
        default_empty_value=find_bool_prop(elem, "RegexExtractor.default_empty_value"),
        **_scope_fields(elem),
    )


def build_regex_extractor_element(component: RegexExtractor) -> ET.Element:
    elem = open_node(component)
    add_string_prop(elem, "RegexExtractor.useHeaders", component.use_headers)
    add_string_prop(elem, "RegexExtractor.refname", component.ref_name)
    add_string_prop(elem, "RegexExtractor.regex", component.regex)
    add_string_prop(elem, "RegexExtractor.template", component.template)
    add_string_prop(elem, "RegexExtractor.default", component.default_value)
    add_bool_prop(elem, "RegexExtractor.default_empty_value", component.default_empty_value)
    add_int_or_expression(elem, "RegexExtractor.match_number", component.match_number)
    _add_scope(elem, component)
    return elem


# --- JSON Extractor ---

class JSONPostProcessor(ScopedExtractor):
    type: Literal["JSONPostProcessor"] = "JSONPostProcessor"
    gui_class: str = "JSONPostProcessorGui"
    name: str = "JSON Extractor"
    reference_names: str = ""
    json_path_exprs: str = ""
    compute_concat: bool = False


def parse_json_extractor_element(elem: ET.Element) -> JSONPostProcessor:
    return decode_component(
        elem,
        JSONPostProcessor,
        reference_names=get_string_prop(elem, "JSONPostProcessor.referenceNames"),
        json_path_exprs=get_string_prop(elem, "JSONPostProcessor.jsonPathExprs"),
        match_number=get_int_or_expression(elem, "JSONPostProcessor.match_numbers"),
        default_value=get_string_prop(elem, "JSONPostProcessor.defaultValues"),
        compute_concat=find_bool_prop(elem, "JSONPostProcessor.compute_concat"),
        **_scope_fields(elem),
    )


def build_json_extractor_element(component: JSONPostProcessor) -> ET.Element:
    elem = open_node(component)
    add_string_prop(elem, "JSONPostProcessor.referenceNames", component.reference_names)
    add_string_prop(elem, "JSONPostProcessor.jsonPathExprs", component.json_path_exprs)
    add_int_or_expression(elem, "JSONPostProcessor.match_numbers", component.match_number)
    add_string_prop(elem, "JSONPostProcessor.defaultValues", component.default_value)
    add_bool_prop(elem, "JSONPostProcessor.compute_concat", component.compute_concat)
    _add_scope(elem, component)
    return elem


# --- Boundary Extractor ---

class BoundaryExtractor(ScopedExtractor):
    type: Literal["BoundaryExtractor"] = "BoundaryExtractor"
    gui_class: str = "BoundaryExtractorGui"
    name: str = "Boundary Extractor"
    ref_name: str = ""
    left_boundary: str = ""
    right_boundary: str = ""
    use_headers: str = "false"
    default_empty_value: bool = False


def parse_boundary_extractor_element(elem: ET.Element) -> BoundaryExtractor:
    return decode_component(
        elem,
        BoundaryExtractor,
        ref_name=get_string_prop(elem, "BoundaryExtractor.refname"),
        left_boundary=get_string_prop(elem, "BoundaryExtractor.lboundary"),
        right_boundary=get_string_prop(elem, "BoundaryExtractor.rboundary"),
        default_value=get_string_prop(elem, "BoundaryExtractor.default"),
        match_number=get_int_or_expression(elem, "BoundaryExtractor.match_number"),
        use_headers=_get_field_to_check(elem, "BoundaryExtractor.useHeaders"),
        default_empty_value=find_bool_prop(elem, "BoundaryExtractor.default_empty_value"),
        **_scope_fields(elem),
    )


def build_boundary_extractor_element(component: BoundaryExtractor) -> ET.Element:
    elem = open_node(component)
    add_string_prop(elem, "BoundaryExtractor.useHeaders", component.use_headers)
    add_string_prop(elem, "BoundaryExtractor.refname", component.ref_name)
    add_string_prop(elem, "BoundaryExtractor.lboundary", component.left_boundary)
    add_string_prop(elem, "BoundaryExtractor.rboundary", component.right_boundary)
    add_string_prop(elem, "BoundaryExtractor.default", component.default_value)
    add_bool_prop(elem, "BoundaryExtractor.default_empty_value", component.default_empty_value)
    add_int_or_expression(elem, "BoundaryExtractor.match_number", component.match_number)
    _add_scope(elem, component)
    return elem


CODECS = [
    Codec("RegexExtractor", RegexExtractor, parse_regex_extractor_element, build_regex_extractor_element, "postprocessor"),
    Codec("JSONPostProcessor", JSONPostProcessor, parse_json_extractor_element, build_json_extractor_element, "postprocessor"),
    Codec("BoundaryExtractor", BoundaryExtractor, parse_boundary_extractor_element, build_boundary_extractor_element, "postprocessor"),
]
