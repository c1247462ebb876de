"""Rebuild the typed tree from a .jmx file.

JMeter does not nest an element's children inside its tag. Every element tag is
followed by a sibling ``<hashTree>`` that holds the children, which again come
as element/hashTree pairs::

    <hashTree>
      <ThreadGroup .../>      <- element 0
      <hashTree>...</hashTree> <- container 0, children of element 0
      <ConstantTimer .../>    <- element 1
      <hashTree/>              <- container 1
    </hashTree>

Within one container the i-th element tag is paired with the i-th hashTree,
counting each list separately in document order.
"""
import xml.etree.ElementTree as ET
from typing import List, Optional, Tuple, Union

from pydantic import BaseModel, Field

from .codec import discriminator
from .errors import JMXParseError
from .model import JMXComponent, JMXDocument, TestPlan
from .registry import CodecRegistry, default_registry

ROOT_TAG = "jmeterTestPlan"
HASH_TREE = "hashTree"

# Diagnostic codes
UNKNOWN_ELEMENT = "unknown-element"
UNPAIRED_ELEMENT = "unpaired-element"
UNPAIRED_CONTAINER = "unpaired-container"
MISSING_TEST_PLAN = "missing-test-plan"


class Diagnostic(BaseModel):
    """Something in the file that was dropped or repaired while building the tree."""
    code: str
    message: str
    path: str = ""
    type: Optional[str] = None
    name: Optional[str] = None


class ParseResult(BaseModel):
    document: JMXDocument
    diagnostics: List[Diagnostic] = Field(default_factory=list)

    @property
    def lossless(self) -> bool:
        """True when nothing in the file was dropped"""
        return not self.diagnostics


def _label(node: ET.Element) -> str:
    return node.get("testname") or discriminator(node)


def _join(path: str, label: str) -> str:
    return f"{path}/{label}" if path else label


def count_elements(container: ET.Element) -> int:
    """Count element tags below a hashTree, ignoring their properties"""
    total = 0
    for child in container:
        if child.tag == HASH_TREE:
            total += count_elements(child)
        else:
            total += 1
    return total


class _TreeBuilder:
    def __init__(self, registry: CodecRegistry):
        self.registry = registry
        self.diagnostics: List[Diagnostic] = []

    def report(self, code: str, message: str, path: str, node: Optional[ET.Element] = None) -> None:
        diagnostic = Diagnostic(code=code, message=message, path=path)
        if node is not None:
            diagnostic.type = discriminator(node)
            diagnostic.name = node.get("testname")
        self.diagnostics.append(diagnostic)

    def pairs(self, container: ET.Element, path: str) -> List[Tuple[ET.Element, ET.Element]]:
        elements = [child for child in container if child.tag != HASH_TREE]
        containers = [child for child in container if child.tag == HASH_TREE]

        for node in elements[len(containers):]:
            self.report(
                UNPAIRED_ELEMENT,
                f"{discriminator(node)} '{_label(node)}' has no hashTree and was dropped",
                _join(path, _label(node)),
                node,
            )
        for _ in containers[len(elements):]:
            self.report(UNPAIRED_CONTAINER, "hashTree without an element was ignored", path)

        return list(zip(elements, containers))

    def drop_unknown(self, node: ET.Element, container: ET.Element, path: str) -> None:
        dropped = count_elements(container)
        message = f"Unsupported element {discriminator(node)} '{_label(node)}' was dropped"
        if dropped:
            message += f" together with {dropped} nested element(s)"
        self.report(UNKNOWN_ELEMENT, message, _join(path, _label(node)), node)

    def reconstruct(self, container: ET.Element, path: str) -> List[JMXComponent]:
        result = []
        for node, children in self.pairs(container, path):
            element = self.registry.decode(node)
            if element is None:
                self.drop_unknown(node, children, path)
                continue
            element.children = self.reconstruct(children, _join(path, element.name))
            result.append(element)
        return result

    def build_plan(self, root: ET.Element) -> TestPlan:
        container = root.find(HASH_TREE)
        if container is None:
            self.report(MISSING_TEST_PLAN, "File has no hashTree; an empty test plan was created", "")
            return TestPlan()

        plan = None
        for node, children in self.pairs(container, ""):
            if plan is None and discriminator(node) == "TestPlan":
                plan = self.registry.decode(node)
                if plan is not None:
                    plan.children = self.reconstruct(children, plan.name)
                    continue
            self.drop_unknown(node, children, "")

        if plan is None:
            self.report(MISSING_TEST_PLAN, "File has no TestPlan element; an empty test plan was created", "")
            return TestPlan()
        return plan


def _load_root(text: Union[str, bytes]) -> ET.Element:
    if isinstance(text, str):
        text = text.lstrip("\ufeff")
    try:
        return ET.fromstring(text)
    except ET.ParseError as e:
        line, column = e.position
        raise JMXParseError(f"Invalid JMX file: {e}", line=line, column=column) from e
    except ValueError as e:
        # expat refuses some declared encodings, e.g. Shift_JIS
        raise JMXParseError(f"Invalid JMX file: {e}") from e


def parse_jmx(text: Union[str, bytes], registry: Optional[CodecRegistry] = None) -> ParseResult:
    """Parse .jmx markup into a document plus the list of everything that was dropped.

    Elements of unsupported kinds cannot be represented, so they are left out
    together with their whole subtree and reported as ``unknown-element``.
    Raises JMXParseError when the text is not well-formed XML or not a JMeter plan.
    """
    root = _load_root(text)
    if root.tag != ROOT_TAG:
        raise JMXParseError(f"Not a JMeter test plan: root element is <{root.tag}>, expected <{ROOT_TAG}>")

    builder = _TreeBuilder(registry or default_registry())
    test_plan = builder.build_plan(root)

    envelope = {key: root.get(key) for key in ("version", "properties", "jmeter")}
    document = JMXDocument(
        test_plan=test_plan,
        **{key: value for key, value in envelope.items() if value is not None},
    )
    return ParseResult(document=document, diagnostics=builder.diagnostics)
