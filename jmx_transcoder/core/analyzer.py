"""Static checks over a loaded plan: load-shape smells, missing validation and
misplaced elements. Findings are advisory; nothing here modifies the plan.
"""
from typing import Dict, FrozenSet, List, Literal, Optional

from pydantic import BaseModel

from .model import Expression, JMXComponent, JMXDocument
from .registry import CodecRegistry, default_registry

Severity = Literal["info", "warning", "error"]

SAMPLER_TYPES = ("HTTPSamplerProxy", "JSR223Sampler")
ASSERTION_TYPES = ("ResponseAssertion", "JSONPathAssertion", "DurationAssertion", "SizeAssertion", "BeanShellAssertion")
SENSITIVE_PATH_WORDS = ("password", "passwd", "token", "secret", "apikey", "api_key")

MAX_THREADS_FOR_SHORT_RAMP = 100
MIN_RAMP_SECONDS = 60
MAX_DISABLED_ELEMENTS = 5
MAX_LISTENERS = 3

_SCOPED = frozenset({"config_element", "preprocessor", "postprocessor", "assertion", "timer", "listener"})

# Which categories JMeter accepts directly under an element of each category
ALLOWED_CHILDREN: Dict[str, FrozenSet[str]] = {
    "root": _SCOPED | {"threads"},
    "threads": _SCOPED | {"sampler", "controller"},
    "controller": _SCOPED | {"sampler", "controller"},
    "sampler": _SCOPED,
}


class Finding(BaseModel):
    severity: Severity
    category: str
    message: str
    element_id: Optional[str] = None
    suggestion: Optional[str] = None


def _as_int(value) -> Optional[int]:
    # Expressions are only known at run time
    if value is None or isinstance(value, Expression):
        return None
    return value


def _check_thread_groups(document: JMXDocument) -> List[Finding]:
    findings = []
    groups = document.thread_groups()
    if not groups:
        findings.append(Finding(
            severity="warning",
            category="best-practice",
            message="No thread groups found in test plan",
            suggestion="Add at least one thread group to execute samplers",
        ))

    for group in groups:
        threads = _as_int(group.num_threads)
        ramp = _as_int(group.ramp_time)
        if threads is not None and ramp is not None:
            if threads > MAX_THREADS_FOR_SHORT_RAMP and ramp < MIN_RAMP_SECONDS:
                findings.append(Finding(
                    severity="warning",
                    category="performance",
                    message=f'Thread group "{group.name}" has {threads} threads with only {ramp}s ramp-up',
                    element_id=group.id,
                    suggestion="Consider increasing ramp-up time to avoid overwhelming the target system",
                ))

        if group.infinite and not (group.scheduler and group.duration is not None):
            findings.append(Finding(
                severity="warning",
                category="best-practice",
                message=f'Thread group "{group.name}" has infinite loops without duration limit',
                element_id=group.id,
                suggestion="Set a duration or use finite loop count to prevent runaway tests",
            ))

        if not group.children:
            findings.append(Finding(
                severity="info",
                category="maintainability",
                message=f'Thread group "{group.name}" is empty',
                element_id=group.id,
                suggestion="Add samplers or remove unused thread group",
            ))
    return findings


def _check_samplers(document: JMXDocument) -> List[Finding]:
    findings = []
    for sampler in document.walk():
        if sampler.type != "HTTPSamplerProxy":
            continue

        if not any(child.type in ASSERTION_TYPES for child in sampler.children):
            findings.append(Finding(
                severity="info",
                category="best-practice",
                message=f'HTTP Sampler "{sampler.name}" has no assertions',
                element_id=sampler.id,
                suggestion="Add response assertions to validate server responses",
            ))

        path = sampler.path.lower()
        if any(word in path for word in SENSITIVE_PATH_WORDS):
            findings.append(Finding(
                severity="warning",
                category="security",
                message=f'HTTP Sampler "{sampler.name}" may contain credentials in URL',
                element_id=sampler.id,
                suggestion="Use variables or property files for sensitive data",
            ))

        if not sampler.domain and not path.startswith(("http://", "https://")):
            findings.append(Finding(
                severity="error",
                category="best-practice",
                message=f'HTTP Sampler "{sampler.name}" has no domain configured',
                element_id=sampler.id,
                suggestion="Configure the server domain or use a variable",
            ))
    return findings


def _check_structure(document: JMXDocument, registry: CodecRegistry) -> List[Finding]:
    findings = []
    elements = list(document.walk())

    for parent in elements:
        parent_codec = registry.lookup(parent.type)
        if parent_codec is None:
            continue
        allowed = ALLOWED_CHILDREN.get(parent_codec.category, frozenset())
        for child in parent.children:
            child_codec = registry.lookup(child.type)
            if child_codec is None or child_codec.category in allowed:
                continue
            findings.append(Finding(
                severity="error",
                category="structure",
                message=f'{child.type} "{child.name}" cannot be placed under {parent.type} "{parent.name}"',
                element_id=child.id,
                suggestion="Move the element to a parent that accepts it",
            ))

    disabled = [element for element in elements if not element.enabled]
    if len(disabled) > MAX_DISABLED_ELEMENTS:
        findings.append(Finding(
            severity="info",
            category="maintainability",
            message=f"Test plan has {len(disabled)} disabled elements",
            suggestion="Consider removing unused elements to improve maintainability",
        ))

    listeners = [e for e in elements if e.type in ("ResultCollector", "BackendListener") and e.enabled]
    if len(listeners) > MAX_LISTENERS:
        findings.append(Finding(
            severity="warning",
            category="performance",
            message=f"Test plan has {len(listeners)} listeners",
            suggestion="Disable listeners during load tests to reduce overhead",
        ))
    return findings


def analyze(document: JMXDocument, registry: Optional[CodecRegistry] = None) -> List[Finding]:
    registry = registry or default_registry()
    findings = []
    findings.extend(_check_thread_groups(document))
    findings.extend(_check_samplers(document))
    findings.extend(_check_structure(document, registry))
    return findings


def _samplers(element: JMXComponent) -> List[JMXComponent]:
    return [e for e in element.walk() if e.type in SAMPLER_TYPES]


def explain(document: JMXDocument) -> str:
    """Plain-text summary of what the plan does"""
    plan = document.test_plan
    groups = document.thread_groups()
    text = f'This JMeter test plan "{plan.name}" '
    if not groups:
        return text + "is empty and contains no thread groups."

    text += f"contains {len(groups)} thread group(s) with a total of {len(_samplers(plan))} sampler(s).\n\n"
    for group in groups:
        samplers = _samplers(group)
        loops = "infinite" if group.infinite else group.loops
        text += f'Thread Group "{group.name}":\n'
        text += f"- Simulates {group.num_threads} concurrent users\n"
        text += f"- Ramps up over {group.ramp_time} seconds\n"
        text += f"- Executes {loops} iteration(s)\n"
        text += f"- Contains {len(samplers)} request(s)\n\n"

        if 0 < len(samplers) <= 5:
            text += "Requests:\n"
            for sampler in samplers:
                if sampler.type == "HTTPSamplerProxy":
                    protocol = sampler.protocol or "http"
                    text += f"  - {sampler.method} {protocol}://{sampler.domain}{sampler.path}\n"
                else:
                    text += f"  - {sampler.name}\n"
            text += "\n"
    return text.strip()
