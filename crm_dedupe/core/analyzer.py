"""Analysis of detection results for the callers that act on them."""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union
import logging
import pandas as pd

from crm_dedupe.config.models import (
    Confidence,
    ConfidenceThresholds,
    DuplicateDetectionResult,
    EntityType
)
from crm_dedupe.config.rules import full_name
from crm_dedupe.core.preprocessor import is_absent

CONFIDENCE_MESSAGES: Dict[Confidence, str] = {
    Confidence.HIGH: (
        "Strong match detected. Creating a duplicate may cause data inconsistencies."
    ),
    Confidence.MEDIUM: (
        "Moderate match detected. Please review the existing records before proceeding."
    ),
    Confidence.LOW: "Weak match detected. The similarities may be coincidental.",
}

# Fields shown for a matched record, after its display name
_DETAIL_FIELDS: Dict[EntityType, Tuple[str, ...]] = {
    EntityType.LEAD: ('companyname', 'emailaddress1', 'telephone1'),
    EntityType.ACCOUNT: ('websiteurl', 'emailaddress1', 'telephone1'),
    EntityType.CONTACT: ('jobtitle', 'emailaddress1', 'telephone1'),
}

@dataclass(frozen=True)
class DuplicateWarning:
    """What a caller needs to warn about, or block, a duplicate creation."""
    entity_label: str
    title: str
    description: str
    confidence: Confidence
    confidence_message: str
    continue_label: str
    merge_label: str
    block_by_default: bool

class ResultAnalyzer:
    """Summarizes detection results without rendering them."""

    # Per-match badge levels, independent of the entity-specific confidence
    SEVERITY_THRESHOLDS = ConfidenceThresholds(high=80, medium=65)

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def summarize(
        self,
        result: DuplicateDetectionResult,
        entity_type: Union[EntityType, str]
    ) -> Optional[DuplicateWarning]:
        """
        Build the warning for a detection result.

        Args:
            result: Result of a detection run
            entity_type: Entity type the result was computed for

        Returns:
            Optional[DuplicateWarning]: None when nothing needs a warning
        """
        if not result.has_duplicates or not result.matches:
            return None

        entity_type = EntityType.coerce(entity_type)
        label = entity_type.label
        count = len(result.matches)
        if count == 1:
            description = (
                "We found 1 existing record that matches the information you entered."
            )
        else:
            description = (
                f"We found {count} existing records that match the information you entered."
            )

        high = result.confidence == Confidence.HIGH
        return DuplicateWarning(
            entity_label=label,
            title=f"Possible Duplicate {label} Detected",
            description=description,
            confidence=result.confidence,
            confidence_message=CONFIDENCE_MESSAGES[result.confidence],
            continue_label="Create Duplicate Anyway" if high else "Continue Creating",
            merge_label=f"Use This {label} Instead",
            block_by_default=high
        )

    def match_severity(self, score: int) -> Confidence:
        """Badge level of a single match score."""
        return self.SEVERITY_THRESHOLDS.classify(score)

    def display_fields(
        self,
        record: Mapping[str, Any],
        entity_type: Union[EntityType, str]
    ) -> Dict[str, str]:
        """Name plus the present detail fields of a matched record."""
        entity_type = EntityType.coerce(entity_type)
        if entity_type == EntityType.ACCOUNT:
            name = record.get('name')
            fields = {'name': '' if is_absent(name) else str(name)}
        else:
            fields = {'name': full_name(record).strip()}

        for field_name in _DETAIL_FIELDS[entity_type]:
            value = record.get(field_name)
            if not is_absent(value):
                fields[field_name] = str(value)
        return fields

    def to_frame(self, result: DuplicateDetectionResult) -> pd.DataFrame:
        """Tabular report of the matches, best first."""
        rows: List[Dict[str, Any]] = [
            {
                'id': match.id,
                'score': match.score,
                'severity': self.match_severity(match.score).value,
                'matched_fields': ', '.join(match.matched_fields)
            }
            for match in result.matches
        ]
        return pd.DataFrame(rows, columns=['id', 'score', 'severity', 'matched_fields'])

    def log_summary(
        self,
        result: DuplicateDetectionResult,
        entity_type: Union[EntityType, str]
    ) -> None:
        """Log the confidence and the top matches of a result."""
        entity_type = EntityType.coerce(entity_type)
        if not result.has_duplicates:
            self.logger.info(f"No duplicate {entity_type.value} records found")
            return

        self.logger.info(
            f"Possible duplicate {entity_type.value} records "
            f"(confidence={result.confidence.value}):"
        )
        for match in result.matches:
            self.logger.info(
                f"- {str(match.id):<36}: score={match.score}, "
                f"fields={', '.join(match.matched_fields)}"
            )
