"""Write the typed tree back out in JMeter's element/hashTree pair layout."""
import xml.etree.ElementTree as ET
from typing import Optional

from .model import JMXComponent, JMXDocument
from .parser import HASH_TREE, ROOT_TAG
from .registry import CodecRegistry, default_registry

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'


def flatten(element: JMXComponent, container: ET.Element, registry: CodecRegistry) -> None:
    """Append ``element`` and its paired hashTree of children to ``container``"""
    container.append(registry.encode(element))
    children = ET.SubElement(container, HASH_TREE)
    for child in element.children:
        flatten(child, children, registry)


def build_tree(document: JMXDocument, registry: Optional[CodecRegistry] = None) -> ET.Element:
    registry = registry or default_registry()
    root = ET.Element(ROOT_TAG, version=document.version, properties=document.properties, jmeter=document.jmeter)
    flatten(document.test_plan, ET.SubElement(root, HASH_TREE), registry)
    return root


def serialize_jmx(document: JMXDocument, registry: Optional[CodecRegistry] = None) -> str:
    """Render a document as .jmx text.

    Output only depends on the tree, so serializing a re-parsed file gives the
    same text back. Raises UnsupportedElementError for an element whose kind has
    no codec.
    """
    root = build_tree(document, registry)
    ET.indent(root, space="  ")
    # JMeter writes empty tags as <tag/>, ElementTree as <tag />
    body = ET.tostring(root, encoding="unicode").replace(" />", "/>")
    return XML_DECLARATION + body + "\n"
