import xml.etree.ElementTree as ET
from typing import Literal

from ..core.codec import Codec, decode_component, open_node
from ..core.model import IntOrExpression, JMXComponent
from ..core.properties import (
    add_double_prop,
    add_int_or_expression,
    add_int_prop,
    get_double_prop,
    get_int_or_expression,
    get_int_prop,
)


class ConstantTimer(JMXComponent):
    type: Literal["ConstantTimer"] = "ConstantTimer"
    gui_class: str = "ConstantTimerGui"
    name: str = "Constant Timer"
    delay: IntOrExpression = 300


class UniformRandomTimer(ConstantTimer):
    """Waits ``delay`` plus a random offset of up to ``range`` milliseconds."""
    type: Literal["UniformRandomTimer"] = "UniformRandomTimer"
    gui_class: str = "UniformRandomTimerGui"
    name: str = "Uniform Random Timer"
    delay: IntOrExpression = 0
    range: IntOrExpression = 100


class GaussianRandomTimer(ConstantTimer):
    """``range`` is the deviation around ``delay``."""
    type: Literal["GaussianRandomTimer"] = "GaussianRandomTimer"
    gui_class: str = "GaussianRandomTimerGui"
    name: str = "Gaussian Random Timer"
    delay: IntOrExpression = 300
    range: IntOrExpression = 100


def parse_constant_timer_element(elem: ET.Element) -> ConstantTimer:
    return decode_component(
        elem,
        ConstantTimer,
        delay=get_int_or_expression(elem, "ConstantTimer.delay"),
    )


def build_constant_timer_element(component: ConstantTimer) -> ET.Element:
    elem = open_node(component)
    add_int_or_expression(elem, "ConstantTimer.delay", component.delay)
    return elem


def _random_timer_parser(model):
    def parse_random_timer_element(elem: ET.Element):
        return decode_component(
            elem,
            model,
            delay=get_int_or_expression(elem, "ConstantTimer.delay"),
            range=get_int_or_expression(elem, "RandomTimer.range"),
        )

    return parse_random_timer_element


def build_random_timer_element(component) -> ET.Element:
    elem = open_node(component)
    add_int_or_expression(elem, "ConstantTimer.delay", component.delay)
    add_int_or_expression(elem, "RandomTimer.range", component.range)
    return elem


# calcMode: 0 this thread only, 1 all active threads, 2 all threads in the group,
# 3 all active threads (shared), 4 all threads in the group (shared)
CALC_MODES = (0, 1, 2, 3, 4)


class ConstantThroughputTimer(JMXComponent):
    """Paces samplers to ``throughput`` samples per minute."""
    type: Literal["ConstantThroughputTimer"] = "ConstantThroughputTimer"
    gui_class: str = "TestBeanGUI"
    name: str = "Constant Throughput Timer"
    calc_mode: int = 0
    throughput: float = 0.0


def parse_throughput_timer_element(elem: ET.Element) -> ConstantThroughputTimer:
    return decode_component(
        elem,
        ConstantThroughputTimer,
        calc_mode=get_int_prop(elem, "calcMode"),
        throughput=get_double_prop(elem, "throughput"),
    )


def build_throughput_timer_element(component: ConstantThroughputTimer) -> ET.Element:
    elem = open_node(component)
    add_int_prop(elem, "calcMode", component.calc_mode)
    add_double_prop(elem, "throughput", component.throughput)
    return elem


CODECS = [
    Codec("ConstantTimer", ConstantTimer, parse_constant_timer_element, build_constant_timer_element, "timer"),
    Codec("UniformRandomTimer", UniformRandomTimer, _random_timer_parser(UniformRandomTimer), build_random_timer_element, "timer"),
    Codec("GaussianRandomTimer", GaussianRandomTimer, _random_timer_parser(GaussianRandomTimer), build_random_timer_element, "timer"),
    Codec("ConstantThroughputTimer", ConstantThroughputTimer, parse_throughput_timer_element, build_throughput_timer_element, "timer"),
]
