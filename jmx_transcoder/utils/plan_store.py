import uuid
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import List, Optional

from ..core.model import JMXDocument
from ..core.parser import Diagnostic


@dataclass
class StoredPlan:
    plan_id: str
    document: JMXDocument
    filename: Optional[str] = None
    diagnostics: List[Diagnostic] = field(default_factory=list)


class PlanStore:
    """Plans loaded into the editor, kept in memory. The least recently used plan
    is evicted once ``max_plans`` is reached.
    """

    def __init__(self, max_plans: int = 32):
        self.max_plans = max_plans
        self._plans: "OrderedDict[str, StoredPlan]" = OrderedDict()

    def add(self, document: JMXDocument, filename: Optional[str] = None, diagnostics: Optional[List[Diagnostic]] = None) -> StoredPlan:
        stored = StoredPlan(str(uuid.uuid4()), document, filename, list(diagnostics or []))
        self._plans[stored.plan_id] = stored
        while len(self._plans) > self.max_plans:
            self._plans.popitem(last=False)
        return stored

    def get(self, plan_id: str) -> Optional[StoredPlan]:
        stored = self._plans.get(plan_id)
        if stored is not None:
            self._plans.move_to_end(plan_id)
        return stored

    def __len__(self) -> int:
        return len(self._plans)

    def __contains__(self, plan_id: str) -> bool:
        return plan_id in self._plans
