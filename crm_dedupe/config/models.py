"""Configuration and result models for the duplicate detection system."""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple, Union
from enum import Enum
from types import MappingProxyType
import logging

class EntityType(str, Enum):
    """CRM record kinds that can be checked for duplicates."""
    LEAD = "lead"
    ACCOUNT = "account"
    CONTACT = "contact"

    @classmethod
    def coerce(cls, value: Union["EntityType", str]) -> "EntityType":
        """
        Convert a caller-supplied entity type into an EntityType.

        Raises:
            ValueError: If the value names no known entity type
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(f"Unknown entity type: {value!r}") from None

    @property
    def id_field(self) -> str:
        return f"{self.value}id"

    @property
    def label(self) -> str:
        return self.value.capitalize()

class Confidence(str, Enum):
    """Coarse confidence of a detection result."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

@dataclass(frozen=True)
class ConfidenceThresholds:
    """Inclusive top-score cutoffs for the confidence buckets."""
    high: int
    medium: int

    def __post_init__(self):
        if self.medium < 0 or self.high < 0:
            raise ValueError("Confidence thresholds must be non-negative")
        if self.medium > self.high:
            raise ValueError(
                f"Medium threshold {self.medium} exceeds high threshold {self.high}"
            )

    def classify(self, score: int) -> Confidence:
        if score >= self.high:
            return Confidence.HIGH
        elif score >= self.medium:
            return Confidence.MEDIUM
        return Confidence.LOW

def _default_confidence_thresholds() -> Dict[EntityType, ConfidenceThresholds]:
    return {
        EntityType.LEAD: ConfidenceThresholds(high=80, medium=65),
        EntityType.ACCOUNT: ConfidenceThresholds(high=80, medium=65),
        EntityType.CONTACT: ConfidenceThresholds(high=85, medium=70),
    }

@dataclass(frozen=True)
class DetectionConfig:
    """Configuration for a duplicate detection run."""
    admission_threshold: int = 50
    max_matches: int = 5
    confidence_thresholds: Mapping[EntityType, ConfidenceThresholds] = field(
        default_factory=_default_confidence_thresholds
    )
    worker_threads: int = 1
    parallel_threshold: int = 1000  # Minimum pool size for the thread pool
    log_level: int = logging.INFO

    # Thresholds stay a mapping, so configs are compared but never hashed
    __hash__ = None

    def __post_init__(self):
        """Validate limits and fill in missing entity thresholds."""
        if self.admission_threshold < 0:
            raise ValueError("admission_threshold must be non-negative")
        if self.max_matches < 1:
            raise ValueError("max_matches must be at least 1")
        if self.worker_threads < 1:
            raise ValueError("worker_threads must be at least 1")

        thresholds = _default_confidence_thresholds()
        thresholds.update(
            (EntityType.coerce(key), value)
            for key, value in self.confidence_thresholds.items()
        )
        object.__setattr__(self, 'confidence_thresholds', MappingProxyType(thresholds))

    def thresholds_for(self, entity_type: EntityType) -> ConfidenceThresholds:
        return self.confidence_thresholds[entity_type]

@dataclass(frozen=True)
class RuleOutcome:
    """Summed points and labels produced by one rule set for one pair."""
    points: int = 0
    matched_fields: Tuple[str, ...] = ()

@dataclass(frozen=True)
class DuplicateMatch:
    """An existing record that scored at or above the admission threshold."""
    id: Optional[Any]
    score: int
    matched_fields: Tuple[str, ...]
    record: Mapping[str, Any] = field(compare=False, repr=False)

@dataclass(frozen=True)
class DuplicateDetectionResult:
    """Ranked duplicates for one candidate record."""
    has_duplicates: bool
    matches: Tuple[DuplicateMatch, ...]
    confidence: Confidence

    @classmethod
    def empty(cls) -> "DuplicateDetectionResult":
        return cls(has_duplicates=False, matches=(), confidence=Confidence.LOW)

    @property
    def top_match(self) -> Optional[DuplicateMatch]:
        return self.matches[0] if self.matches else None
