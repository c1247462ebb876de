import xml.etree.ElementTree as ET
from typing import Literal, Optional

from ..core.codec import Codec, decode_component, open_node
from ..core.model import IntOrExpression, JMXComponent
from ..core.properties import (
    INT_PROP,
    add_bool_prop,
    add_element_prop,
    add_int_or_expression,
    add_string_prop,
    find_bool_prop,
    find_element_prop,
    get_int_or_expression,
    get_string_prop,
)

ON_SAMPLE_ERROR_OPTIONS = ("continue", "startnextloop", "stopthread", "stoptest", "stoptestnow")


class ThreadGroup(JMXComponent):
    type: Literal["ThreadGroup"] = "ThreadGroup"
    gui_class: str = "ThreadGroupGui"
    name: str = "Thread Group"
    num_threads: IntOrExpression = 1
    ramp_time: IntOrExpression = 1
    loops: IntOrExpression = 1
    continue_forever: bool = False
    on_sample_error: str = "continue"
    scheduler: bool = False
    duration: Optional[IntOrExpression] = None
    delay: Optional[IntOrExpression] = None
    same_user_on_next_iteration: bool = True
    delayed_start: Optional[bool] = None

    @property
    def infinite(self) -> bool:
        return self.continue_forever or self.loops == -1


class SetupThreadGroup(ThreadGroup):
    type: Literal["SetupThreadGroup"] = "SetupThreadGroup"
    gui_class: str = "SetupThreadGroupGui"
    name: str = "setUp Thread Group"


class PostThreadGroup(ThreadGroup):
    type: Literal["PostThreadGroup"] = "PostThreadGroup"
    gui_class: str = "PostThreadGroupGui"
    name: str = "tearDown Thread Group"


def parse_thread_group_element(elem: ET.Element, model=ThreadGroup) -> ThreadGroup:
    # Loop settings live in a nested LoopController, found by its elementType
    loop_controller = find_element_prop(elem, element_type="LoopController")
    loops = None
    continue_forever = None
    if loop_controller is not None:
        loops = get_int_or_expression(loop_controller, "LoopController.loops")
        continue_forever = find_bool_prop(loop_controller, "LoopController.continue_forever")

    return decode_component(
        elem,
        model,
        num_threads=get_int_or_expression(elem, "ThreadGroup.num_threads"),
        ramp_time=get_int_or_expression(elem, "ThreadGroup.ramp_time"),
        loops=loops,
        continue_forever=continue_forever,
        on_sample_error=get_string_prop(elem, "ThreadGroup.on_sample_error") or None,
        scheduler=find_bool_prop(elem, "ThreadGroup.scheduler"),
        duration=get_int_or_expression(elem, "ThreadGroup.duration"),
        delay=get_int_or_expression(elem, "ThreadGroup.delay"),
        same_user_on_next_iteration=find_bool_prop(elem, "ThreadGroup.same_user_on_next_iteration"),
        delayed_start=find_bool_prop(elem, "ThreadGroup.delayedStart"),
    )


def build_thread_group_element(component: ThreadGroup) -> ET.Element:
    elem = open_node(component)
    add_int_or_expression(elem, "ThreadGroup.num_threads", component.num_threads, INT_PROP)
    add_int_or_expression(elem, "ThreadGroup.ramp_time", component.ramp_time, INT_PROP)
    add_bool_prop(elem, "ThreadGroup.same_user_on_next_iteration", component.same_user_on_next_iteration)
    add_bool_prop(elem, "ThreadGroup.delayedStart", component.delayed_start)
    add_string_prop(elem, "ThreadGroup.on_sample_error", component.on_sample_error)

    loop_controller = add_element_prop(
        elem,
        "ThreadGroup.main_controller",
        "LoopController",
        guiclass="LoopControlPanel",
        testclass="LoopController",
        testname="Loop Controller",
        enabled="true",
    )
    add_int_or_expression(loop_controller, "LoopController.loops", component.loops)
    add_bool_prop(loop_controller, "LoopController.continue_forever", component.continue_forever)

    add_bool_prop(elem, "ThreadGroup.scheduler", component.scheduler)
    add_int_or_expression(elem, "ThreadGroup.duration", component.duration)
    add_int_or_expression(elem, "ThreadGroup.delay", component.delay)
    return elem


CODECS = [
    Codec("ThreadGroup", ThreadGroup, parse_thread_group_element, build_thread_group_element, "threads"),
    Codec(
        "SetupThreadGroup",
        SetupThreadGroup,
        lambda elem: parse_thread_group_element(elem, SetupThreadGroup),
        build_thread_group_element,
        "threads",
    ),
    Codec(
        "PostThreadGroup",
        PostThreadGroup,
        lambda elem: parse_thread_group_element(elem, PostThreadGroup),
        build_thread_group_element,
        "threads",
    ),
]
