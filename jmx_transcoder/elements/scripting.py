"""JSR223 elements: a sampler and pre/post processors that run an inline script."""
import xml.etree.ElementTree as ET
from typing import Literal, Type

from ..core.codec import Codec, decode_component, open_node
from ..core.model import JMXComponent
from ..core.properties import add_string_prop, get_string_prop

SCRIPT_LANGUAGES = ("groovy", "javascript", "beanshell", "java", "jexl")


class ScriptElement(JMXComponent):
    gui_class: str = "TestBeanGUI"
    script_language: str = "groovy"
    script: str = ""
    parameters: str = ""
    filename: str = ""
    cache_key: str = "true"


class JSR223Sampler(ScriptElement):
    type: Literal["JSR223Sampler"] = "JSR223Sampler"
    name: str = "JSR223 Sampler"


class JSR223PreProcessor(ScriptElement):
    type: Literal["JSR223PreProcessor"] = "JSR223PreProcessor"
    name: str = "JSR223 PreProcessor"


class JSR223PostProcessor(ScriptElement):
    type: Literal["JSR223PostProcessor"] = "JSR223PostProcessor"
    name: str = "JSR223 PostProcessor"


def _parser(model: Type[ScriptElement]):
    def parse_script_element(elem: ET.Element) -> ScriptElement:
        return decode_component(
            elem,
            model,
            script_language=get_string_prop(elem, "scriptLanguage") or None,
            script=get_string_prop(elem, "script"),
            parameters=get_string_prop(elem, "parameters"),
            filename=get_string_prop(elem, "filename"),
            cache_key=get_string_prop(elem, "cacheKey"),
        )

    return parse_script_element


def build_script_element(component: ScriptElement) -> ET.Element:
    elem = open_node(component)
    add_string_prop(elem, "cacheKey", component.cache_key)
    add_string_prop(elem, "filename", component.filename)
    add_string_prop(elem, "parameters", component.parameters)
    add_string_prop(elem, "script", component.script)
    add_string_prop(elem, "scriptLanguage", component.script_language)
    return elem


CODECS = [
    Codec("JSR223Sampler", JSR223Sampler, _parser(JSR223Sampler), build_script_element, "sampler"),
    Codec("JSR223PreProcessor", JSR223PreProcessor, _parser(JSR223PreProcessor), build_script_element, "preprocessor"),
    Codec("JSR223PostProcessor", JSR223PostProcessor, _parser(JSR223PostProcessor), build_script_element, "postprocessor"),
]
