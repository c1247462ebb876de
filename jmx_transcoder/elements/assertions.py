import xml.etree.ElementTree as ET
from typing import List, Literal, Optional

from pydantic import Field

from ..core.codec import Codec, decode_component, open_node
from ..core.model import IntOrExpression, JMXComponent
from ..core.properties import (
    COLLECTION_PROP,
    add_bool_prop,
    add_int_or_expression,
    add_int_prop,
    add_string_collection,
    add_string_prop,
    find_bool_prop,
    find_prop,
    get_int_or_expression,
    get_int_prop,
    get_string_collection,
    get_string_prop,
)

# JMeter's property name really is misspelled
TEST_STRINGS_PROP = "Asserion.test_strings"

# Assertion.test_type is a bit mask: one match rule plus optional NOT / OR flags
MATCH = 1
CONTAINS = 2
NOT = 4
EQUALS = 8
SUBSTRING = 16
OR = 32

TEST_FIELDS = (
    "Assertion.response_data",
    "Assertion.response_data_as_document",
    "Assertion.response_code",
    "Assertion.response_message",
    "Assertion.response_headers",
    "Assertion.request_headers",
    "Assertion.request_data",
    "Assertion.sample_label",
)


class ResponseAssertion(JMXComponent):
    type: Literal["ResponseAssertion"] = "ResponseAssertion"
    gui_class: str = "AssertionGui"
    name: str = "Response Assertion"
    test_strings: List[str] = Field(default_factory=list)
    custom_message: str = ""
    test_field: str = "Assertion.response_data"
    assume_success: bool = False
    test_type: int = CONTAINS
    scope: Optional[str] = None

    @property
    def negated(self) -> bool:
        return bool(self.test_type & NOT)


def parse_response_assertion_element(elem: ET.Element) -> ResponseAssertion:
    # An absent collection keeps the default; an empty one is still an empty list
    strings = None
    if find_prop(elem, COLLECTION_PROP, TEST_STRINGS_PROP) is not None:
        strings = get_string_collection(elem, TEST_STRINGS_PROP)
    return decode_component(
        elem,
        ResponseAssertion,
        test_strings=strings,
        custom_message=get_string_prop(elem, "Assertion.custom_message"),
        test_field=get_string_prop(elem, "Assertion.test_field") or None,
        assume_success=find_bool_prop(elem, "Assertion.assume_success"),
        test_type=get_int_prop(elem, "Assertion.test_type"),
        scope=get_string_prop(elem, "Assertion.scope"),
    )


def build_response_assertion_element(component: ResponseAssertion) -> ET.Element:
    elem = open_node(component)
    add_string_collection(elem, TEST_STRINGS_PROP, component.test_strings)
    add_string_prop(elem, "Assertion.custom_message", component.custom_message)
    add_string_prop(elem, "Assertion.test_field", component.test_field)
    add_bool_prop(elem, "Assertion.assume_success", component.assume_success)
    add_int_prop(elem, "Assertion.test_type", component.test_type)
    add_string_prop(elem, "Assertion.scope", component.scope)
    return elem


class JSONPathAssertion(JMXComponent):
    type: Literal["JSONPathAssertion"] = "JSONPathAssertion"
    gui_class: str = "JSONPathAssertionGui"
    name: str = "JSON Assertion"
    json_path: str = ""
    expected_value: str = ""
    json_validation: bool = False
    expect_null: bool = False
    invert: bool = False
    is_regex: bool = True


def parse_json_assertion_element(elem: ET.Element) -> JSONPathAssertion:
    return decode_component(
        elem,
        JSONPathAssertion,
        json_path=get_string_prop(elem, "JSON_PATH"),
        expected_value=get_string_prop(elem, "EXPECTED_VALUE"),
        json_validation=find_bool_prop(elem, "JSONVALIDATION"),
        expect_null=find_bool_prop(elem, "EXPECT_NULL"),
        invert=find_bool_prop(elem, "INVERT"),
        is_regex=find_bool_prop(elem, "ISREGEX"),
    )


def build_json_assertion_element(component: JSONPathAssertion) -> ET.Element:
    elem = open_node(component)
    add_string_prop(elem, "JSON_PATH", component.json_path)
    add_string_prop(elem, "EXPECTED_VALUE", component.expected_value)
    add_bool_prop(elem, "JSONVALIDATION", component.json_validation)
    add_bool_prop(elem, "EXPECT_NULL", component.expect_null)
    add_bool_prop(elem, "INVERT", component.invert)
    add_bool_prop(elem, "ISREGEX", component.is_regex)
    return elem


class DurationAssertion(JMXComponent):
    """Fails a sample that takes longer than ``duration`` milliseconds."""
    type: Literal["DurationAssertion"] = "DurationAssertion"
    gui_class: str = "DurationAssertionGui"
    name: str = "Duration Assertion"
    duration: IntOrExpression = 1000


def parse_duration_assertion_element(elem: ET.Element) -> DurationAssertion:
    return decode_component(
        elem,
        DurationAssertion,
        duration=get_int_or_expression(elem, "DurationAssertion.duration"),
    )


def build_duration_assertion_element(component: DurationAssertion) -> ET.Element:
    elem = open_node(component)
    add_int_or_expression(elem, "DurationAssertion.duration", component.duration)
    return elem


# SizeAssertion.operator: 1 '=', 2 '!=', 3 '>', 4 '<', 5 '>=', 6 '<='
SIZE_OPERATORS = {1: "=", 2: "!=", 3: ">", 4: "<", 5: ">=", 6: "<="}


class SizeAssertion(JMXComponent):
    type: Literal["SizeAssertion"] = "SizeAssertion"
    gui_class: str = "SizeAssertionGui"
    name: str = "Size Assertion"
    size: IntOrExpression = 0
    operator: int = 1
    test_field: str = "SizeAssertion.response_network_size"


def parse_size_assertion_element(elem: ET.Element) -> SizeAssertion:
    return decode_component(
        elem,
        SizeAssertion,
        size=get_int_or_expression(elem, "SizeAssertion.size"),
        operator=get_int_prop(elem, "SizeAssertion.operator"),
        test_field=get_string_prop(elem, "Assertion.test_field") or None,
    )


def build_size_assertion_element(component: SizeAssertion) -> ET.Element:
    elem = open_node(component)
    add_string_prop(elem, "Assertion.test_field", component.test_field)
    add_int_or_expression(elem, "SizeAssertion.size", component.size)
    add_int_prop(elem, "SizeAssertion.operator", component.operator)
    return elem


class BeanShellAssertion(JMXComponent):
    type: Literal["BeanShellAssertion"] = "BeanShellAssertion"
    gui_class: str = "BeanShellAssertionGui"
    name: str = "BeanShell Assertion"
    query: str = ""
    filename: str = ""
    parameters: str = ""
    reset_interpreter: bool = False


def parse_beanshell_assertion_element(elem: ET.Element) -> BeanShellAssertion:
    return decode_component(
        elem,
        BeanShellAssertion,
        query=get_string_prop(elem, "BeanShellAssertion.query"),
        filename=get_string_prop(elem, "BeanShellAssertion.filename"),
        parameters=get_string_prop(elem, "BeanShellAssertion.parameters"),
        reset_interpreter=find_bool_prop(elem, "BeanShellAssertion.resetInterpreter"),
    )


def build_beanshell_assertion_element(component: BeanShellAssertion) -> ET.Element:
    elem = open_node(component)
    add_string_prop(elem, "BeanShellAssertion.query", component.query)
    add_string_prop(elem, "BeanShellAssertion.filename", component.filename)
    add_string_prop(elem, "BeanShellAssertion.parameters", component.parameters)
    add_bool_prop(elem, "BeanShellAssertion.resetInterpreter", component.reset_interpreter)
    return elem


CODECS = [
    Codec("ResponseAssertion", ResponseAssertion, parse_response_assertion_element, build_response_assertion_element, "assertion"),
    Codec("JSONPathAssertion", JSONPathAssertion, parse_json_assertion_element, build_json_assertion_element, "assertion"),
    Codec("DurationAssertion", DurationAssertion, parse_duration_assertion_element, build_duration_assertion_element, "assertion"),
    Codec("SizeAssertion", SizeAssertion, parse_size_assertion_element, build_size_assertion_element, "assertion"),
    Codec("BeanShellAssertion", BeanShellAssertion, parse_beanshell_assertion_element, build_beanshell_assertion_element, "assertion"),
]
