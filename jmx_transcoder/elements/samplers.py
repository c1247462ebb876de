import xml.etree.ElementTree as ET
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from ..core.codec import Codec, decode_component, open_node
from ..core.model import IntOrExpression, JMXComponent
from ..core.properties import (
    add_bool_prop,
    add_collection_prop,
    add_element_prop,
    add_int_or_expression,
    add_int_prop,
    add_string_prop,
    find_bool_prop,
    find_element_prop,
    get_bool_prop,
    get_collection_elements,
    get_int_or_expression,
    get_int_prop,
    get_string_prop,
)

HTTP_METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS", "TRACE")
ARGUMENTS_PROP = "HTTPsampler.Arguments"


class HTTPArgument(BaseModel):
    name: str = ""
    value: str = ""
    metadata: str = "="
    always_encode: bool = False
    use_equals: bool = True


class HTTPSamplerProxy(JMXComponent):
    type: Literal["HTTPSamplerProxy"] = "HTTPSamplerProxy"
    gui_class: str = "HttpTestSampleGui"
    name: str = "HTTP Request"
    domain: str = ""
    port: Optional[IntOrExpression] = None
    protocol: str = "https"
    path: str = "/"
    method: str = "GET"
    content_encoding: Optional[str] = None
    follow_redirects: bool = True
    auto_redirects: bool = False
    use_keepalive: bool = True
    do_multipart_post: bool = False
    embedded_url_re: Optional[str] = None
    connect_timeout: Optional[IntOrExpression] = None
    response_timeout: Optional[IntOrExpression] = None
    implementation: Optional[str] = None
    concurrent_pool: Optional[int] = None
    # Raw body mode sends ``body`` as-is; otherwise ``arguments`` are sent as parameters
    post_body_raw: bool = False
    body: Optional[str] = None
    arguments: List[HTTPArgument] = Field(default_factory=list)


def parse_http_argument(elem: ET.Element) -> HTTPArgument:
    name = get_string_prop(elem, "Argument.name")
    values = {
        "name": elem.get("name", "") if name is None else name,
        "value": get_string_prop(elem, "Argument.value"),
        "metadata": get_string_prop(elem, "Argument.metadata"),
        "always_encode": find_bool_prop(elem, "HTTPArgument.always_encode"),
        "use_equals": find_bool_prop(elem, "HTTPArgument.use_equals"),
    }
    return HTTPArgument(**{key: value for key, value in values.items() if value is not None})


def parse_http_sampler_element(elem: ET.Element) -> HTTPSamplerProxy:
    arguments_prop = find_element_prop(elem, name=ARGUMENTS_PROP)
    arguments = []
    if arguments_prop is not None:
        arguments = [parse_http_argument(entry) for entry in get_collection_elements(arguments_prop, "Arguments.arguments")]

    post_body_raw = get_bool_prop(elem, "HTTPSampler.postBodyRaw")
    body = None
    if post_body_raw:
        body = arguments[0].value if arguments else ""
        arguments = []

    return decode_component(
        elem,
        HTTPSamplerProxy,
        domain=get_string_prop(elem, "HTTPSampler.domain"),
        port=get_int_or_expression(elem, "HTTPSampler.port"),
        # Empty is kept as-is, JMeter runs it as http
        protocol=get_string_prop(elem, "HTTPSampler.protocol"),
        path=get_string_prop(elem, "HTTPSampler.path"),
        method=get_string_prop(elem, "HTTPSampler.method") or None,
        content_encoding=get_string_prop(elem, "HTTPSampler.contentEncoding"),
        follow_redirects=find_bool_prop(elem, "HTTPSampler.follow_redirects"),
        auto_redirects=find_bool_prop(elem, "HTTPSampler.auto_redirects"),
        use_keepalive=find_bool_prop(elem, "HTTPSampler.use_keepalive"),
        do_multipart_post=find_bool_prop(elem, "HTTPSampler.DO_MULTIPART_POST"),
        embedded_url_re=get_string_prop(elem, "HTTPSampler.embedded_url_re"),
        connect_timeout=get_int_or_expression(elem, "HTTPSampler.connect_timeout"),
        response_timeout=get_int_or_expression(elem, "HTTPSampler.response_timeout"),
        implementation=get_string_prop(elem, "HTTPSampler.implementation"),
        concurrent_pool=get_int_prop(elem, "HTTPSampler.concurrentPool"),
        post_body_raw=post_body_raw,
        body=body,
        arguments=arguments,
    )


def _add_http_argument(collection: ET.Element, argument: HTTPArgument) -> None:
    entry = add_element_prop(collection, argument.name, "HTTPArgument")
    add_bool_prop(entry, "HTTPArgument.always_encode", argument.always_encode)
    add_string_prop(entry, "Argument.value", argument.value)
    add_string_prop(entry, "Argument.metadata", argument.metadata)
    add_bool_prop(entry, "HTTPArgument.use_equals", argument.use_equals)
    add_string_prop(entry, "Argument.name", argument.name)


def build_http_sampler_element(component: HTTPSamplerProxy) -> ET.Element:
    elem = open_node(component)
    add_string_prop(elem, "HTTPSampler.domain", component.domain)
    add_int_or_expression(elem, "HTTPSampler.port", component.port)
    add_string_prop(elem, "HTTPSampler.protocol", component.protocol)
    add_string_prop(elem, "HTTPSampler.contentEncoding", component.content_encoding)
    add_string_prop(elem, "HTTPSampler.path", component.path)
    add_string_prop(elem, "HTTPSampler.method", component.method)
    add_bool_prop(elem, "HTTPSampler.follow_redirects", component.follow_redirects)
    add_bool_prop(elem, "HTTPSampler.auto_redirects", component.auto_redirects)
    add_bool_prop(elem, "HTTPSampler.use_keepalive", component.use_keepalive)
    add_bool_prop(elem, "HTTPSampler.DO_MULTIPART_POST", component.do_multipart_post)
    add_string_prop(elem, "HTTPSampler.embedded_url_re", component.embedded_url_re)
    add_int_or_expression(elem, "HTTPSampler.connect_timeout", component.connect_timeout)
    add_int_or_expression(elem, "HTTPSampler.response_timeout", component.response_timeout)
    add_string_prop(elem, "HTTPSampler.implementation", component.implementation)
    add_int_prop(elem, "HTTPSampler.concurrentPool", component.concurrent_pool)
    if component.post_body_raw:
        add_bool_prop(elem, "HTTPSampler.postBodyRaw", True)

    # JMeter always writes the arguments container, even when it is empty
    arguments_prop = add_element_prop(
        elem,
        ARGUMENTS_PROP,
        "Arguments",
        guiclass="HTTPArgumentsPanel",
        testclass="Arguments",
        testname="User Defined Variables",
        enabled="true",
    )
    collection = add_collection_prop(arguments_prop, "Arguments.arguments")
    if component.post_body_raw:
        _add_http_argument(collection, HTTPArgument(value=component.body or "", always_encode=False))
    else:
        for argument in component.arguments:
            _add_http_argument(collection, argument)
    return elem


class TestAction(JMXComponent):
    """Flow Control Action: pause, stop or restart a thread or the whole test."""
    __test__ = False

    type: Literal["TestAction"] = "TestAction"
    gui_class: str = "TestActionGui"
    name: str = "Flow Control Action"
    action: int = 1
    target: int = 0
    duration: IntOrExpression = 0


def parse_test_action_element(elem: ET.Element) -> TestAction:
    return decode_component(
        elem,
        TestAction,
        action=get_int_prop(elem, "ActionProcessor.action"),
        target=get_int_prop(elem, "ActionProcessor.target"),
        duration=get_int_or_expression(elem, "ActionProcessor.duration"),
    )


def build_test_action_element(component: TestAction) -> ET.Element:
    elem = open_node(component)
    add_int_prop(elem, "ActionProcessor.action", component.action)
    add_int_prop(elem, "ActionProcessor.target", component.target)
    add_int_or_expression(elem, "ActionProcessor.duration", component.duration)
    return elem


CODECS = [
    Codec("HTTPSamplerProxy", HTTPSamplerProxy, parse_http_sampler_element, build_http_sampler_element, "sampler"),
    Codec("TestAction", TestAction, parse_test_action_element, build_test_action_element, "sampler"),
]
