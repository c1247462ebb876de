"""Pick which top-level thread groups a run should execute."""
from typing import Iterable, List

from .model import JMXDocument


def thread_group_names(document: JMXDocument) -> List[str]:
    return [group.name for group in document.thread_groups()]


def select_thread_groups(document: JMXDocument, names: Iterable[str]) -> JMXDocument:
    """Return a copy of ``document`` where only the named thread groups are enabled.

    The original document is left untouched. Raises ValueError if a name does
    not match any top-level thread group.
    """
    wanted = set(names)
    unknown = wanted - set(thread_group_names(document))
    if unknown:
        raise ValueError(f"Unknown thread group(s): {', '.join(sorted(unknown))}")

    selected = document.model_copy(deep=True)
    for group in selected.thread_groups():
        group.enabled = group.name in wanted
    return selected
