"""Listeners: result collectors and the backend metrics listener."""
import xml.etree.ElementTree as ET
from typing import Dict, List, Literal, Optional

from pydantic import Field

from ..core.codec import Codec, decode_arguments, decode_component, encode_arguments, open_node
from ..core.model import Argument, IntOrExpression, JMXComponent
from ..core.properties import (
    add_bool_prop,
    add_element_prop,
    add_int_or_expression,
    add_string_prop,
    find_bool_prop,
    find_element_prop,
    get_int_or_expression,
    get_string_prop,
)

# ResultCollector is one test class behind several GUIs
LISTENER_GUIS = {
    "ViewResultsFullVisualizer": "View Results Tree",
    "SummaryReport": "Summary Report",
    "StatVisualizer": "Aggregate Report",
    "SimpleDataWriter": "Simple Data Writer",
}

SAVE_CONFIG_CLASS = "SampleSaveConfiguration"

DEFAULT_SAVE_CONFIG = {
    "time": "true",
    "latency": "true",
    "timestamp": "true",
    "success": "true",
    "label": "true",
    "code": "true",
    "message": "true",
    "threadName": "true",
    "dataType": "true",
    "encoding": "false",
    "assertions": "true",
    "subresults": "true",
    "responseData": "false",
    "samplerData": "false",
    "xml": "false",
    "fieldNames": "true",
    "responseHeaders": "false",
    "requestHeaders": "false",
    "responseDataOnError": "false",
    "saveAssertionResultsFailureMessage": "true",
    "assertionsResultsToSave": "0",
    "bytes": "true",
    "sentBytes": "true",
    "url": "true",
    "threadCounts": "true",
    "idleTime": "true",
    "connectTime": "true",
}


class ResultCollector(JMXComponent):
    type: Literal["ResultCollector"] = "ResultCollector"
    gui_class: str = "ViewResultsFullVisualizer"
    name: str = "View Results Tree"
    filename: str = ""
    error_logging: bool = False
    success_only_logging: Optional[bool] = None
    # The <objProp> sample save configuration, kept field by field in file order
    save_config: Dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_SAVE_CONFIG))


def _find_save_config(elem: ET.Element) -> Optional[Dict[str, str]]:
    for obj_prop in elem.findall("objProp"):
        if obj_prop.findtext("name") != "saveConfig":
            continue
        value = obj_prop.find("value")
        if value is None:
            return None
        return {field.tag: field.text or "" for field in value}
    return None


def parse_result_collector_element(elem: ET.Element) -> ResultCollector:
    return decode_component(
        elem,
        ResultCollector,
        filename=get_string_prop(elem, "filename"),
        error_logging=find_bool_prop(elem, "ResultCollector.error_logging"),
        success_only_logging=find_bool_prop(elem, "ResultCollector.success_only_logging"),
        save_config=_find_save_config(elem),
    )


def build_result_collector_element(component: ResultCollector) -> ET.Element:
    elem = open_node(component)
    add_bool_prop(elem, "ResultCollector.error_logging", component.error_logging)
    add_bool_prop(elem, "ResultCollector.success_only_logging", component.success_only_logging)
    obj_prop = ET.SubElement(elem, "objProp")
    ET.SubElement(obj_prop, "name").text = "saveConfig"
    value = ET.SubElement(obj_prop, "value", {"class": SAVE_CONFIG_CLASS})
    for key, text in component.save_config.items():
        ET.SubElement(value, key).text = text
    add_string_prop(elem, "filename", component.filename)
    return elem


INFLUXDB_CLIENT = "org.apache.jmeter.visualizers.backend.influxdb.InfluxdbBackendListenerClient"


class BackendListener(JMXComponent):
    type: Literal["BackendListener"] = "BackendListener"
    gui_class: str = "BackendListenerGui"
    name: str = "Backend Listener"
    classname: str = INFLUXDB_CLIENT
    queue_size: IntOrExpression = 5000
    arguments: List[Argument] = Field(default_factory=list)


def parse_backend_listener_element(elem: ET.Element) -> BackendListener:
    holder = find_element_prop(elem, name="arguments")
    return decode_component(
        elem,
        BackendListener,
        classname=get_string_prop(elem, "classname") or None,
        queue_size=get_int_or_expression(elem, "QUEUE_SIZE"),
        arguments=None if holder is None else decode_arguments(holder),
    )


def build_backend_listener_element(component: BackendListener) -> ET.Element:
    elem = open_node(component)
    holder = add_element_prop(elem, "arguments", "Arguments", guiclass="ArgumentsPanel", testclass="Arguments")
    encode_arguments(holder, component.arguments)
    add_string_prop(elem, "classname", component.classname)
    add_int_or_expression(elem, "QUEUE_SIZE", component.queue_size)
    return elem


CODECS = [
    Codec("ResultCollector", ResultCollector, parse_result_collector_element, build_result_collector_element, "listener"),
    Codec("BackendListener", BackendListener, parse_backend_listener_element, build_backend_listener_element, "listener"),
]
