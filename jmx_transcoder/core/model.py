"""Typed test-plan tree.

These types describe JMeter concepts, not XML: an element owns an ordered list
of child elements, and the sibling ``hashTree`` pairing of the file format never
leaks past the parser and serializer.
"""
import itertools
from typing import Any, Dict, Iterator, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, SerializeAsAny, model_validator

from .errors import ElementNotFoundError

_id_counter = itertools.count(1)

THREAD_GROUP_TYPES = ("ThreadGroup", "SetupThreadGroup", "PostThreadGroup")

# Managed by the tree itself, never set through field edits
LOCKED_FIELDS = frozenset({"id", "type", "children"})


def generate_id() -> str:
    """Generate a process-local element identity (never written to a .jmx file)"""
    return f"el-{next(_id_counter)}"


def check_editable(fields: Dict[str, Any]) -> None:
    locked = LOCKED_FIELDS & set(fields)
    if locked:
        raise ValueError(f"Fields cannot be edited: {', '.join(sorted(locked))}")


class Expression(BaseModel):
    """A value kept as raw text because it is not a plain integer, e.g. ``${LOOP_COUNT}``.

    Resolving it to a number is left to whoever runs the plan.
    """
    model_config = ConfigDict(frozen=True)

    text: str

    @model_validator(mode="before")
    @classmethod
    def _accept_plain_text(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"text": data}
        return data

    @property
    def is_variable_reference(self) -> bool:
        return "${" in self.text

    def __str__(self) -> str:
        return self.text


IntOrExpression = Union[int, Expression]


def as_text(value: Optional[IntOrExpression]) -> Optional[str]:
    if value is None:
        return None
    return str(value)


class Argument(BaseModel):
    name: str = ""
    value: str = ""
    metadata: Optional[str] = "="


class JMXComponent(BaseModel):
    """One node of the test-plan tree."""
    model_config = ConfigDict(extra="forbid")

    id: str = Field(default_factory=generate_id)
    type: str
    gui_class: str = ""
    name: str = ""
    enabled: bool = True
    comments: Optional[str] = None
    children: List[SerializeAsAny["JMXComponent"]] = Field(default_factory=list)

    def walk(self) -> Iterator["JMXComponent"]:
        """Yield this element and every descendant, depth-first pre-order"""
        yield self
        for child in self.children:
            yield from child.walk()


class TestPlan(JMXComponent):
    __test__ = False  # keep pytest from collecting this class

    type: Literal["TestPlan"] = "TestPlan"
    gui_class: str = "TestPlanGui"
    name: str = "Test Plan"
    functional_mode: bool = False
    serialize_threadgroups: bool = False
    teardown_on_shutdown: bool = True
    user_define_classpath: Optional[str] = None
    user_defined_variables: List[Argument] = Field(default_factory=list)


JMXComponent.model_rebuild()


class JMXDocument(BaseModel):
    """A whole .jmx file: the ``<jmeterTestPlan>`` envelope and its test plan."""
    version: str = "1.2"
    properties: str = "5.0"
    jmeter: str = "5.6.3"
    test_plan: TestPlan = Field(default_factory=TestPlan)

    def walk(self) -> Iterator[JMXComponent]:
        return self.test_plan.walk()

    def find(self, element_id: str) -> JMXComponent:
        for element in self.walk():
            if element.id == element_id:
                return element
        raise ElementNotFoundError(element_id)

    def find_parent(self, element_id: str) -> Optional[JMXComponent]:
        """Return the parent of an element, or None for the test plan itself"""
        if self.test_plan.id == element_id:
            return None
        for element in self.walk():
            for child in element.children:
                if child.id == element_id:
                    return element
        raise ElementNotFoundError(element_id)

    def thread_groups(self) -> List[JMXComponent]:
        return [c for c in self.test_plan.children if c.type in THREAD_GROUP_TYPES]

    # --- editing by identity ---

    def insert(self, parent_id: str, element: JMXComponent, index: Optional[int] = None) -> JMXComponent:
        parent = self.find(parent_id)
        if any(isinstance(node, TestPlan) for node in element.walk()):
            raise ValueError("A test plan cannot be nested inside another element")
        taken = set()
        for existing in self.walk():
            if existing is element:
                raise ValueError(f"Element {element.id} is already part of this plan")
            taken.add(existing.id)

        for node in element.walk():
            if node.id in taken:
                node.id = generate_id()
            taken.add(node.id)

        if index is None:
            parent.children.append(element)
        else:
            parent.children.insert(index, element)
        return element

    def remove(self, element_id: str) -> JMXComponent:
        parent = self.find_parent(element_id)
        if parent is None:
            raise ValueError("The test plan itself cannot be removed")
        element = self.find(element_id)
        parent.children.remove(element)
        return element

    def toggle(self, element_id: str) -> JMXComponent:
        element = self.find(element_id)
        element.enabled = not element.enabled
        return element

    def update(self, element_id: str, fields: Dict[str, Any]) -> JMXComponent:
        """Apply field edits in place after validating them against the element's kind"""
        element = self.find(element_id)
        check_editable(fields)

        data = element.model_dump(exclude={"children"})
        data.update(fields)
        validated = type(element).model_validate(data)
        for key in fields:
            setattr(element, key, getattr(validated, key))
        return element


def structural_dump(element: JMXComponent) -> Dict[str, Any]:
    """Dump an element tree without identities, for comparing two parses"""
    data = element.model_dump(exclude={"id", "children"})
    data["children"] = [structural_dump(child) for child in element.children]
    return data
