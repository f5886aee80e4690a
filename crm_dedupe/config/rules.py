"""Field-weight matching rules for the duplicate detection system."""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Union
from dataclasses import dataclass

from crm_dedupe.config.models import EntityType, RuleOutcome
from crm_dedupe.core.preprocessor import is_absent, registry
from crm_dedupe.core.validator import similarity

Record = Mapping[str, Any]
FieldAccessor = Callable[[Record], Any]

def full_name(record: Record) -> str:
    """First and last name joined by a space; missing parts become ''."""
    first = record.get('firstname')
    last = record.get('lastname')
    return f"{'' if is_absent(first) else first} {'' if is_absent(last) else last}"

def _accessor(source: Union[str, FieldAccessor]) -> FieldAccessor:
    if callable(source):
        return source
    return lambda record: record.get(source)

class FieldRule(ABC):
    """Base class for a single weighted field comparison."""

    def __init__(self, points: int, label: str):
        self.points = points
        self.label = label

    @abstractmethod
    def applies(self, candidate: Record, existing: Record) -> bool:
        """
        Determine if the rule fires for a candidate/existing pair.

        Args:
            candidate: Record being created
            existing: Stored record it is compared against

        Returns:
            bool: Whether the rule's points should be awarded
        """
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(label={self.label!r}, points={self.points})"

class SimilarityRule(FieldRule):
    """Fires when the similarity of a field falls in [at_least, below)."""

    def __init__(
        self,
        source: Union[str, FieldAccessor],
        points: int,
        label: str,
        at_least: int,
        below: Optional[int] = None,
        require_present: bool = True
    ):
        super().__init__(points, label)
        self.get_value = _accessor(source)
        self.at_least = at_least
        self.below = below
        self.require_present = require_present

    def applies(self, candidate: Record, existing: Record) -> bool:
        left = self.get_value(candidate)
        right = self.get_value(existing)
        if self.require_present and (is_absent(left) or is_absent(right)):
            return False

        score = similarity(left, right)
        if self.below is not None and score >= self.below:
            return False
        return score >= self.at_least

class DomainRule(FieldRule):
    """Fires when both records yield the same non-empty domain."""

    def __init__(self, field_name: str, preprocess_method: str, points: int, label: str):
        super().__init__(points, label)
        self.field_name = field_name
        self.preprocessor = registry.create(preprocess_method)

    def applies(self, candidate: Record, existing: Record) -> bool:
        left = candidate.get(self.field_name)
        right = existing.get(self.field_name)
        if is_absent(left) or is_absent(right):
            return False

        left_domain = self.preprocessor.process(left)
        return bool(left_domain) and left_domain == self.preprocessor.process(right)

class SameParentRule(FieldRule):
    """Fires when both records share a parent id and their names are alike."""

    def __init__(
        self,
        parent_field: str,
        points: int,
        label: str,
        name_source: Union[str, FieldAccessor] = full_name,
        min_name_similarity: int = 70
    ):
        super().__init__(points, label)
        self.parent_field = parent_field
        self.get_name = _accessor(name_source)
        self.min_name_similarity = min_name_similarity

    def applies(self, candidate: Record, existing: Record) -> bool:
        left = candidate.get(self.parent_field)
        right = existing.get(self.parent_field)
        if is_absent(left) or is_absent(right) or left != right:
            return False

        name_score = similarity(self.get_name(candidate), self.get_name(existing))
        return name_score >= self.min_name_similarity

@dataclass(frozen=True)
class RuleSet:
    """Ordered rules for one entity type; every rule is always evaluated."""

    entity_type: EntityType
    rules: Tuple[FieldRule, ...]

    def score(self, candidate: Record, existing: Record) -> RuleOutcome:
        """
        Sum the points of every rule that fires.

        Args:
            candidate: Record being created
            existing: Stored record it is compared against

        Returns:
            RuleOutcome: Total points and labels in rule order
        """
        fired = [
            rule for rule in self.rules
            if rule.applies(candidate, existing)
        ]
        return RuleOutcome(
            points=sum(rule.points for rule in fired),
            matched_fields=tuple(rule.label for rule in fired)
        )

LEAD_RULES = RuleSet(EntityType.LEAD, (
    SimilarityRule('emailaddress1', 40, 'email', at_least=100),
    # strictly above 80 and short of exact
    SimilarityRule('emailaddress1', 20, 'email (similar)', at_least=81, below=100),
    SimilarityRule(full_name, 25, 'name', at_least=90, require_present=False),
    SimilarityRule(full_name, 15, 'name (similar)', at_least=70, below=90, require_present=False),
    SimilarityRule('companyname', 20, 'company', at_least=90),
    SimilarityRule('companyname', 10, 'company (similar)', at_least=70, below=90),
    SimilarityRule('telephone1', 15, 'phone', at_least=100),
))

ACCOUNT_RULES = RuleSet(EntityType.ACCOUNT, (
    SimilarityRule('name', 50, 'name', at_least=95),
    SimilarityRule('name', 30, 'name (similar)', at_least=80, below=95),
    DomainRule('websiteurl', 'web_domain', 30, 'website'),
    DomainRule('emailaddress1', 'email_domain', 15, 'email domain'),
    SimilarityRule('telephone1', 5, 'phone', at_least=100),
))

CONTACT_RULES = RuleSet(EntityType.CONTACT, (
    SimilarityRule('emailaddress1', 45, 'email', at_least=100),
    SimilarityRule(full_name, 30, 'name', at_least=95, require_present=False),
    SimilarityRule(full_name, 20, 'name (similar)', at_least=80, below=95, require_present=False),
    SameParentRule('parentcustomerid', 15, 'same account', min_name_similarity=70),
    SimilarityRule('telephone1', 10, 'phone', at_least=100),
))

_RULE_SETS: Dict[EntityType, RuleSet] = {
    rule_set.entity_type: rule_set
    for rule_set in (LEAD_RULES, ACCOUNT_RULES, CONTACT_RULES)
}

def get_rule_set(entity_type: Union[EntityType, str]) -> RuleSet:
    """
    Look up the rule set for an entity type.

    Raises:
        ValueError: If the entity type is unknown
    """
    return _RULE_SETS[EntityType.coerce(entity_type)]
