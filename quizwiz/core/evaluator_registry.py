# quizwiz/core/evaluator_registry.py
from typing import Dict, Iterable, Mapping, Optional, Tuple

from quizwiz.evaluators.base_evaluator import BaseEvaluator


class EvaluatorRegistry:
    """
    Registry of evaluator instances by strategy name, plus the closed routing
    table (subject, answer type) -> strategy name used by the dispatcher.
    """

    def __init__(self):
        self._evaluators: Dict[str, BaseEvaluator] = {}
        self._routes: Dict[Tuple[str, str], str] = {}

    def register(self, name: str, evaluator: BaseEvaluator):
        self._evaluators[name] = evaluator

    def get(self, name: str) -> BaseEvaluator:
        evaluator = self._evaluators.get(name)
        if evaluator is None:
            raise KeyError(f"Evaluator '{name}' not registered.")
        return evaluator

    def add_route(self, subject: str, answer_type: str, strategy: str):
        self._routes[(subject, answer_type)] = strategy

    def route_for(self, subject: str, answer_type: str) -> Optional[str]:
        return self._routes.get((subject, answer_type))

    def check_exhaustive(self, subject_variants: Mapping[str, Iterable[str]], dynamic: Iterable[str] = ()):
        """Fail fast if a valid (subject, variant) pair has no route or points nowhere."""
        dynamic = set(dynamic)
        missing = [
            (subject, variant)
            for subject, variants in subject_variants.items()
            for variant in variants
            if (subject, variant) not in self._routes
        ]
        if missing:
            raise RuntimeError(f"Evaluator routes missing for: {missing}")
        dangling = [s for s in self._routes.values() if s not in self._evaluators and s not in dynamic]
        if dangling:
            raise RuntimeError(f"Routes point to unregistered evaluators: {dangling}")

    def list_evaluators(self):
        return list(self._evaluators.keys())
