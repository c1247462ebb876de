import xml.etree.ElementTree as ET
from typing import Optional

from ..core.codec import Codec, add_arguments_prop, decode_arguments, decode_component, open_node
from ..core.model import TestPlan
from ..core.properties import (
    add_bool_prop,
    add_string_prop,
    find_bool_prop,
    find_element_prop,
    get_string_prop,
)


def _find_flag(elem: ET.Element, name: str) -> Optional[bool]:
    # Some generators write plan flags as stringProp instead of boolProp
    value = find_bool_prop(elem, name)
    if value is None:
        text = get_string_prop(elem, name)
        if text is not None and text.strip():
            value = text.strip().lower() == "true"
    return value


def parse_test_plan_element(elem: ET.Element) -> TestPlan:
    variables = find_element_prop(elem, name="TestPlan.user_defined_variables")
    return decode_component(
        elem,
        TestPlan,
        functional_mode=_find_flag(elem, "TestPlan.functional_mode"),
        teardown_on_shutdown=_find_flag(elem, "TestPlan.tearDown_on_shutdown"),
        serialize_threadgroups=_find_flag(elem, "TestPlan.serialize_threadgroups"),
        user_define_classpath=get_string_prop(elem, "TestPlan.user_define_classpath"),
        user_defined_variables=decode_arguments(variables),
    )


def build_test_plan_element(component: TestPlan) -> ET.Element:
    elem = open_node(component)
    add_bool_prop(elem, "TestPlan.functional_mode", component.functional_mode)
    add_bool_prop(elem, "TestPlan.tearDown_on_shutdown", component.teardown_on_shutdown)
    add_bool_prop(elem, "TestPlan.serialize_threadgroups", component.serialize_threadgroups)
    # The global variables block is always written, even when empty
    add_arguments_prop(elem, "TestPlan.user_defined_variables", component.user_defined_variables)
    add_string_prop(elem, "TestPlan.user_define_classpath", component.user_define_classpath)
    return elem


CODECS = [
    Codec("TestPlan", TestPlan, parse_test_plan_element, build_test_plan_element, "root"),
]
