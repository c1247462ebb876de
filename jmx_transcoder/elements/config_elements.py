import xml.etree.ElementTree as ET
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from ..core.codec import Codec, decode_arguments, decode_component, encode_arguments, open_node
from ..core.model import Argument, IntOrExpression, JMXComponent
from ..core.properties import (
    add_bool_prop,
    add_collection_prop,
    add_element_prop,
    add_int_or_expression,
    add_int_prop,
    add_long_prop,
    add_string_prop,
    find_bool_prop,
    get_collection_elements,
    get_int_or_expression,
    get_int_prop,
    get_long_prop,
    get_string_prop,
)

SHARE_MODES = ("shareMode.all", "shareMode.group", "shareMode.thread")


def _present(**values):
    return {key: value for key, value in values.items() if value is not None}


# --- User Defined Variables ---

class Arguments(JMXComponent):
    type: Literal["Arguments"] = "Arguments"
    gui_class: str = "ArgumentsPanel"
    name: str = "User Defined Variables"
    variables: List[Argument] = Field(default_factory=list)


def parse_arguments_element(elem: ET.Element) -> Arguments:
    return decode_component(elem, Arguments, variables=decode_arguments(elem))


def build_arguments_element(component: Arguments) -> ET.Element:
    elem = open_node(component)
    encode_arguments(elem, component.variables)
    return elem


# --- HTTP Header Manager ---

class Header(BaseModel):
    name: str = ""
    value: str = ""


class HeaderManager(JMXComponent):
    type: Literal["HeaderManager"] = "HeaderManager"
    gui_class: str = "HeaderPanel"
    name: str = "HTTP Header Manager"
    headers: List[Header] = Field(default_factory=list)


def parse_header_manager_element(elem: ET.Element) -> HeaderManager:
    headers = []
    for header_elem in get_collection_elements(elem, "HeaderManager.headers"):
        name = get_string_prop(header_elem, "Header.name") or ""
        value = get_string_prop(header_elem, "Header.value") or ""
        headers.append(Header(name=name, value=value))
    return decode_component(elem, HeaderManager, headers=headers)


def build_header_manager_element(component: HeaderManager) -> ET.Element:
    elem = open_node(component)
    collection = add_collection_prop(elem, "HeaderManager.headers")
    for header in component.headers:
        entry = add_element_prop(collection, "", "Header")
        add_string_prop(entry, "Header.name", header.name)
        add_string_prop(entry, "Header.value", header.value)
    return elem


# --- CSV Data Set Config ---

class CSVDataSet(JMXComponent):
    type: Literal["CSVDataSet"] = "CSVDataSet"
    gui_class: str = "TestBeanGUI"
    name: str = "CSV Data Set Config"
    filename: str = ""
    file_encoding: str = "UTF-8"
    variable_names: str = ""
    ignore_first_line: bool = False
    delimiter: str = ","
    quoted_data: bool = False
    recycle: bool = True
    stop_thread: bool = False
    share_mode: str = "shareMode.all"


def parse_csv_data_set_element(elem: ET.Element) -> CSVDataSet:
    return decode_component(
        elem,
        CSVDataSet,
        filename=get_string_prop(elem, "filename"),
        file_encoding=get_string_prop(elem, "fileEncoding"),
        variable_names=get_string_prop(elem, "variableNames"),
        ignore_first_line=find_bool_prop(elem, "ignoreFirstLine"),
        delimiter=get_string_prop(elem, "delimiter"),
        quoted_data=find_bool_prop(elem, "quotedData"),
        recycle=find_bool_prop(elem, "recycle"),
        stop_thread=find_bool_prop(elem, "stopThread"),
        share_mode=get_string_prop(elem, "shareMode") or None,
    )


def build_csv_data_set_element(component: CSVDataSet) -> ET.Element:
    elem = open_node(component)
    add_string_prop(elem, "delimiter", component.delimiter)
    add_string_prop(elem, "fileEncoding", component.file_encoding)
    add_string_prop(elem, "filename", component.filename)
    add_bool_prop(elem, "ignoreFirstLine", component.ignore_first_line)
    add_bool_prop(elem, "quotedData", component.quoted_data)
    add_bool_prop(elem, "recycle", component.recycle)
    add_string_prop(elem, "shareMode", component.share_mode)
    add_bool_prop(elem, "stopThread", component.stop_thread)
    add_string_prop(elem, "variableNames", component.variable_names)
    return elem


# --- HTTP Cookie Manager ---

class Cookie(BaseModel):
    name: str = ""
    value: str = ""
    domain: str = ""
    path: str = "/"
    secure: bool = False
    expires: int = 0


class CookieManager(JMXComponent):
    type: Literal["CookieManager"] = "CookieManager"
    gui_class: str = "CookiePanel"
    name: str = "HTTP Cookie Manager"
    clear_each_iteration: bool = False
    controlled_by_threadgroup: bool = False
    policy: Optional[str] = None
    cookies: List[Cookie] = Field(default_factory=list)


def parse_cookie_manager_element(elem: ET.Element) -> CookieManager:
    cookies = []
    for cookie_elem in get_collection_elements(elem, "CookieManager.cookies"):
        cookies.append(Cookie(**_present(
            name=cookie_elem.get("name"),
            value=get_string_prop(cookie_elem, "Cookie.value"),
            domain=get_string_prop(cookie_elem, "Cookie.domain"),
            path=get_string_prop(cookie_elem, "Cookie.path"),
            secure=find_bool_prop(cookie_elem, "Cookie.secure"),
            expires=get_long_prop(cookie_elem, "Cookie.expires"),
        )))
    return decode_component(
        elem,
        CookieManager,
        clear_each_iteration=find_bool_prop(elem, "CookieManager.clearEachIteration"),
        controlled_by_threadgroup=find_bool_prop(elem, "CookieManager.controlledByThreadGroup"),
        policy=get_string_prop(elem, "CookieManager.policy"),
        cookies=cookies,
    )


def build_cookie_manager_element(component: CookieManager) -> ET.Element:
    elem = open_node(component)
    collection = add_collection_prop(elem, "CookieManager.cookies")
    for cookie in component.cookies:
        entry = add_element_prop(collection, cookie.name, "Cookie", testname=cookie.name)
        add_string_prop(entry, "Cookie.value", cookie.value)
        add_string_prop(entry, "Cookie.domain", cookie.domain)
        add_string_prop(entry, "Cookie.path", cookie.path)
        add_bool_prop(entry, "Cookie.secure", cookie.secure)
        add_long_prop(entry, "Cookie.expires", cookie.expires)
    add_bool_prop(elem, "CookieManager.clearEachIteration", component.clear_each_iteration)
    add_bool_prop(elem, "CookieManager.controlledByThreadGroup", component.controlled_by_threadgroup)
    add_string_prop(elem, "CookieManager.policy", component.policy)
    return elem


# --- HTTP Cache Manager ---

class CacheManager(JMXComponent):
    type: Literal["CacheManager"] = "CacheManager"
    gui_class: str = "CacheManagerGui"
    name: str = "HTTP Cache Manager"
    clear_each_iteration: bool = False
    use_expires: bool = True
    controlled_by_thread: bool = False
    max_size: Optional[int] = None


def parse_cache_manager_element(elem: ET.Element) -> CacheManager:
    return decode_component(
        elem,
        CacheManager,
        clear_each_iteration=find_bool_prop(elem, "clearEachIteration"),
        use_expires=find_bool_prop(elem, "useExpires"),
        controlled_by_thread=find_bool_prop(elem, "CacheManager.controlledByThread"),
        max_size=get_int_prop(elem, "maxSize"),
    )


def build_cache_manager_element(component: CacheManager) -> ET.Element:
    elem = open_node(component)
    add_bool_prop(elem, "clearEachIteration", component.clear_each_iteration)
    add_bool_prop(elem, "useExpires", component.use_expires)
    add_bool_prop(elem, "CacheManager.controlledByThread", component.controlled_by_thread)
    add_int_prop(elem, "maxSize", component.max_size)
    return elem


# --- HTTP Authorization Manager ---

class Authorization(BaseModel):
    url: str = ""
    username: str = ""
    password: str = ""
    domain: str = ""
    realm: str = ""
    mechanism: Optional[str] = None


class AuthManager(JMXComponent):
    type: Literal["AuthManager"] = "AuthManager"
    gui_class: str = "AuthPanel"
    name: str = "HTTP Authorization Manager"
    authorizations: List[Authorization] = Field(default_factory=list)
    controlled_by_threadgroup: bool = False


def parse_auth_manager_element(elem: ET.Element) -> AuthManager:
    authorizations = []
    for auth_elem in get_collection_elements(elem, "AuthManager.auth_list"):
        authorizations.append(Authorization(**_present(
            url=get_string_prop(auth_elem, "Authorization.url"),
            username=get_string_prop(auth_elem, "Authorization.username"),
            password=get_string_prop(auth_elem, "Authorization.password"),
            domain=get_string_prop(auth_elem, "Authorization.domain"),
            realm=get_string_prop(auth_elem, "Authorization.realm"),
            mechanism=get_string_prop(auth_elem, "Authorization.mechanism"),
        )))
    return decode_component(
        elem,
        AuthManager,
        authorizations=authorizations,
        controlled_by_threadgroup=find_bool_prop(elem, "AuthManager.controlledByThreadGroup"),
    )


def build_auth_manager_element(component: AuthManager) -> ET.Element:
    elem = open_node(component)
    collection = add_collection_prop(elem, "AuthManager.auth_list")
    for auth in component.authorizations:
        entry = add_element_prop(collection, "", "Authorization")
        add_string_prop(entry, "Authorization.url", auth.url)
        add_string_prop(entry, "Authorization.username", auth.username)
        add_string_prop(entry, "Authorization.password", auth.password)
        add_string_prop(entry, "Authorization.domain", auth.domain)
        add_string_prop(entry, "Authorization.realm", auth.realm)
        add_string_prop(entry, "Authorization.mechanism", auth.mechanism)
    add_bool_prop(elem, "AuthManager.controlledByThreadGroup", component.controlled_by_threadgroup)
    return elem


# --- Counter ---

class CounterConfig(JMXComponent):
    type: Literal["CounterConfig"] = "CounterConfig"
    gui_class: str = "CounterConfigGui"
    name: str = "Counter"
    start: IntOrExpression = 1
    end: Optional[IntOrExpression] = None
    increment: IntOrExpression = 1
    reference_name: str = ""
    format: str = ""
    per_user: bool = False
    reset_on_tg_iteration: bool = False


def parse_counter_element(elem: ET.Element) -> CounterConfig:
    return decode_component(
        elem,
        CounterConfig,
        start=get_int_or_expression(elem, "CounterConfig.start"),
        end=get_int_or_expression(elem, "CounterConfig.end"),
        increment=get_int_or_expression(elem, "CounterConfig.incr"),
        reference_name=get_string_prop(elem, "CounterConfig.name"),
        format=get_string_prop(elem, "CounterConfig.format"),
        per_user=find_bool_prop(elem, "CounterConfig.per_user"),
        reset_on_tg_iteration=find_bool_prop(elem, "CounterConfig.reset_on_tg_iteration"),
    )


def build_counter_element(component: CounterConfig) -> ET.Element:
    elem = open_node(component)
    add_int_or_expression(elem, "CounterConfig.start", component.start)
    add_int_or_expression(elem, "CounterConfig.end", component.end)
    add_int_or_expression(elem, "CounterConfig.incr", component.increment)
    add_string_prop(elem, "CounterConfig.name", component.reference_name)
    add_string_prop(elem, "CounterConfig.format", component.format)
    add_bool_prop(elem, "CounterConfig.per_user", component.per_user)
    add_bool_prop(elem, "CounterConfig.reset_on_tg_iteration", component.reset_on_tg_iteration)
    return elem


CODECS = [
    Codec("Arguments", Arguments, parse_arguments_element, build_arguments_element, "config_element"),
    Codec("HeaderManager", HeaderManager, parse_header_manager_element, build_header_manager_element, "config_element"),
    Codec("CSVDataSet", CSVDataSet, parse_csv_data_set_element, build_csv_data_set_element, "config_element"),
    Codec("CookieManager", CookieManager, parse_cookie_manager_element, build_cookie_manager_element, "config_element"),
    Codec("CacheManager", CacheManager, parse_cache_manager_element, build_cache_manager_element, "config_element"),
    Codec("AuthManager", AuthManager, parse_auth_manager_element, build_auth_manager_element, "config_element"),
    Codec("CounterConfig", CounterConfig, parse_counter_element, build_counter_element, "config_element"),
]
