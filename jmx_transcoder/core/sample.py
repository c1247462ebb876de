from typing import Optional

from .model import JMXDocument
from .registry import CodecRegistry, default_registry


def build_sample_plan(registry: Optional[CodecRegistry] = None, **envelope: str) -> JMXDocument:
    """A small demonstration plan: one thread group calling a public echo API"""
    registry = registry or default_registry()

    plan = registry.create(
        "TestPlan",
        name="Sample Test Plan",
        comments="This is a sample test plan created for demonstration",
    )
    thread_group = registry.create("ThreadGroup", name="Sample Thread Group", num_threads=10, ramp_time=30)
    request = registry.create(
        "HTTPSamplerProxy",
        name="Sample API Request",
        domain="httpbin.org",
        protocol="https",
        path="/get",
        method="GET",
    )
    request.children.append(registry.create("ResponseAssertion", name="Status 200", test_field="Assertion.response_code", test_strings=["200"]))
    headers = registry.create(
        "HeaderManager",
        headers=[
            {"name": "Accept", "value": "application/json"},
            {"name": "User-Agent", "value": "jmx-transcoder/0.1"},
        ],
    )
    thread_group.children.extend([request, headers, registry.create("ResultCollector")])
    plan.children.append(thread_group)
    return JMXDocument(test_plan=plan, **envelope)
