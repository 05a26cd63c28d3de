"""Answer validation and scoring policies."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional

from .errors import UnsupportedFormatError


class ValidationPolicy(ABC):
    """Decides whether an answer is correct and how many points it earns."""

    name: str = "abstract"

    @abstractmethod
    def validate(self, given_answer: str, correct_answer: str) -> bool:
        """Return True when ``given_answer`` matches ``correct_answer``."""

    def calculate_points(self, base_value: int) -> int:
        """Points awarded for a correct answer to a question worth ``base_value``."""
        return base_value


class CaseInsensitivePolicy(ValidationPolicy):
    """Trimmed, case-insensitive comparison with face-value points."""

    name = "default"

    def validate(self, given_answer: str, correct_answer: str) -> bool:
        if given_answer is None or correct_answer is None:
            return False
        return given_answer.strip().casefold() == correct_answer.strip().casefold()


class ExactMatchPolicy(ValidationPolicy):
    """Case-sensitive, untrimmed comparison."""

    name = "exact"

    def validate(self, given_answer: str, correct_answer: str) -> bool:
        return given_answer == correct_answer


class ScaledPointsPolicy(CaseInsensitivePolicy):
    """Default matching, with awarded points multiplied by ``multiplier``."""

    name = "scaled"

    def __init__(self, multiplier: int = 2) -> None:
        if multiplier < 1:
            raise ValueError(f"Multiplier must be at least 1, got {multiplier}")
        self.multiplier = multiplier

    def calculate_points(self, base_value: int) -> int:
        return base_value * self.multiplier


DEFAULT_POLICY = CaseInsensitivePolicy()


class PolicyFactory:
    """Registry creating policies by name."""

    _policies: Dict[str, type[ValidationPolicy]] = {}

    @classmethod
    def register(cls, name: str, policy_class: type[ValidationPolicy]) -> None:
        cls._policies[name] = policy_class

    @classmethod
    def create(cls, policy_name: str, **kwargs: Any) -> ValidationPolicy:
        key = policy_name.strip().lower()
        if key not in cls._policies:
            raise UnsupportedFormatError(policy_name, kind="validation policy")
        return cls._policies[key](**kwargs)

    @classmethod
    def list_policies(cls) -> List[str]:
        return sorted(cls._policies)


PolicyFactory.register(CaseInsensitivePolicy.name, CaseInsensitivePolicy)
PolicyFactory.register(ExactMatchPolicy.name, ExactMatchPolicy)
PolicyFactory.register(ScaledPointsPolicy.name, ScaledPointsPolicy)


class CategoryPolicies:
    """Routes a category to its policy, falling back to a default."""

    def __init__(
        self,
        *,
        per_category: Optional[Mapping[str, ValidationPolicy]] = None,
        default: ValidationPolicy = DEFAULT_POLICY,
    ) -> None:
        self._per_category = dict(per_category or {})
        self.default = default

    def for_category(self, category: str) -> ValidationPolicy:
        return self._per_category.get(category, self.default)

    @classmethod
    def from_names(
        cls,
        names: Mapping[str, str],
        *,
        default: str = CaseInsensitivePolicy.name,
        multiplier: int = 1,
    ) -> "CategoryPolicies":
        """Build a router from ``{category: policy_name}``."""

        def build(name: str) -> ValidationPolicy:
            if name.strip().lower() == ScaledPointsPolicy.name:
                return PolicyFactory.create(name, multiplier=max(multiplier, 1))
            return PolicyFactory.create(name)

        return cls(
            per_category={category: build(name) for category, name in names.items()},
            default=build(default),
        )


__all__ = [
    "ValidationPolicy",
    "CaseInsensitivePolicy",
    "ExactMatchPolicy",
    "ScaledPointsPolicy",
    "DEFAULT_POLICY",
    "PolicyFactory",
    "CategoryPolicies",
]
