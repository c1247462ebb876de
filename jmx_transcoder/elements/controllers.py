"""Logic controllers: elements that decide how often and whether their children run."""
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


class LoopController(JMXComponent):
    type: Literal["LoopController"] = "LoopController"
    gui_class: str = "LoopControlPanel"
    name: str = "Loop Controller"
    loops: IntOrExpression = 1
    # Inside a thread group this flag means "loop forever"; standalone JMeter sets it
    continue_forever: bool = True


def parse_loop_controller_element(elem: ET.Element) -> LoopController:
    return decode_component(
        elem,
        LoopController,
        loops=get_int_or_expression(elem, "LoopController.loops"),
        continue_forever=find_bool_prop(elem, "LoopController.continue_forever"),
    )


def build_loop_controller_element(component: LoopController) -> ET.Element:
    elem = open_node(component)
    add_bool_prop(elem, "LoopController.continue_forever", component.continue_forever)
    add_int_or_expression(elem, "LoopController.loops", component.loops)
    return elem


class IfController(JMXComponent):
    type: Literal["IfController"] = "IfController"
    gui_class: str = "IfControllerPanel"
    name: str = "If Controller"
    condition: str = ""
    evaluate_all: bool = False
    use_expression: bool = True


def parse_if_controller_element(elem: ET.Element) -> IfController:
    return decode_component(
        elem,
        IfController,
        condition=get_string_prop(elem, "IfController.condition"),
        evaluate_all=find_bool_prop(elem, "IfController.evaluateAll"),
        use_expression=find_bool_prop(elem, "IfController.useExpression"),
    )


def build_if_controller_element(component: IfController) -> ET.Element:
    elem = open_node(component)
    add_string_prop(elem, "IfController.condition", component.condition)
    add_bool_prop(elem, "IfController.evaluateAll", component.evaluate_all)
    add_bool_prop(elem, "IfController.useExpression", component.use_expression)
    return elem


class WhileController(JMXComponent):
    type: Literal["WhileController"] = "WhileController"
    gui_class: str = "WhileControllerGui"
    name: str = "While Controller"
    condition: str = ""


def parse_while_controller_element(elem: ET.Element) -> WhileController:
    return decode_component(
        elem,
        WhileController,
        condition=get_string_prop(elem, "WhileController.condition"),
    )


def build_while_controller_element(component: WhileController) -> ET.Element:
    elem = open_node(component)
    add_string_prop(elem, "WhileController.condition", component.condition)
    return elem


class ForeachController(JMXComponent):
    type: Literal["ForeachController"] = "ForeachController"
    gui_class: str = "ForeachControlPanel"
    name: str = "ForEach Controller"
    input_variable: str = ""
    output_variable: str = ""
    use_separator: bool = True
    start_index: Optional[IntOrExpression] = None
    end_index: Optional[IntOrExpression] = None


def parse_foreach_controller_element(elem: ET.Element) -> ForeachController:
    return decode_component(
        elem,
        ForeachController,
        input_variable=get_string_prop(elem, "ForeachController.inputVal"),
        output_variable=get_string_prop(elem, "ForeachController.returnVal"),
        use_separator=find_bool_prop(elem, "ForeachController.useSeparator"),
        start_index=get_int_or_expression(elem, "ForeachController.startIndex"),
        end_index=get_int_or_expression(elem, "ForeachController.endIndex"),
    )


def build_foreach_controller_element(component: ForeachController) -> ET.Element:
    elem = open_node(component)
    add_string_prop(elem, "ForeachController.inputVal", component.input_variable)
    add_int_or_expression(elem, "ForeachController.startIndex", component.start_index)
    add_int_or_expression(elem, "ForeachController.endIndex", component.end_index)
    add_string_prop(elem, "ForeachController.returnVal", component.output_variable)
    add_bool_prop(elem, "ForeachController.useSeparator", component.use_separator)
    return elem


class TransactionController(JMXComponent):
    type: Literal["TransactionController"] = "TransactionController"
    gui_class: str = "TransactionControllerGui"
    name: str = "Transaction Controller"
    generate_parent_sample: bool = False
    include_timers: bool = False


def parse_transaction_controller_element(elem: ET.Element) -> TransactionController:
    parent = find_bool_prop(elem, "TransactionController.parent")
    if parent is None:
        parent = find_bool_prop(elem, "TransactionController.generateParentSample")
    return decode_component(
        elem,
        TransactionController,
        generate_parent_sample=parent,
        include_timers=find_bool_prop(elem, "TransactionController.includeTimers"),
    )


def build_transaction_controller_element(component: TransactionController) -> ET.Element:
    elem = open_node(component)
    add_bool_prop(elem, "TransactionController.parent", component.generate_parent_sample)
    add_bool_prop(elem, "TransactionController.includeTimers", component.include_timers)
    return elem


CODECS = [
    Codec("LoopController", LoopController, parse_loop_controller_element, build_loop_controller_element, "controller"),
    Codec("IfController", IfController, parse_if_controller_element, build_if_controller_element, "controller"),
    Codec("WhileController", WhileController, parse_while_controller_element, build_while_controller_element, "controller"),
    Codec("ForeachController", ForeachController, parse_foreach_controller_element, build_foreach_controller_element, "controller"),
    Codec("TransactionController", TransactionController, parse_transaction_controller_element, build_transaction_controller_element, "controller"),
]
