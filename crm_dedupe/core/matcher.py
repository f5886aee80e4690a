"""Duplicate detection: pairwise aggregation and result ranking."""

from typing import Any, Iterable, List, Mapping, Optional, Sequence, Union
from concurrent.futures import ThreadPoolExecutor
import logging
import time
import pandas as pd

from crm_dedupe.config.models import (
    Confidence,
    DetectionConfig,
    DuplicateDetectionResult,
    DuplicateMatch,
    EntityType
)
from crm_dedupe.config.rules import RuleSet, get_rule_set
from crm_dedupe.core.preprocessor import is_absent

Record = Mapping[str, Any]

class DuplicateDetector:
    """
    Finds existing CRM records that likely duplicate a record being created.
    """

    def __init__(self, config: Optional[DetectionConfig] = None):
        """
        Initialize the duplicate detector.

        Args:
            config: Detection settings; defaults reproduce the calibrated
                thresholds for leads, accounts and contacts
        """
        self.config = config or DetectionConfig()
        self._initialize_logging()

    def _initialize_logging(self) -> None:
        """Setup logging configuration."""
        self.logger = logging.getLogger(__name__)
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(
                logging.Formatter(
                    '%(asctime)s - %(levelname)s - %(message)s'
                )
            )
            self.logger.addHandler(handler)
            self.logger.setLevel(self.config.log_level)

    def score_pair(
        self,
        candidate: Record,
        existing: Record,
        entity_type: Union[EntityType, str]
    ) -> Optional[DuplicateMatch]:
        """
        Score one existing record against the candidate.

        Args:
            candidate: Partial record being created
            existing: Stored record of the same entity type
            entity_type: Which rule set to apply

        Returns:
            Optional[DuplicateMatch]: The match, or None below the admission threshold
        """
        return self.aggregate(candidate, existing, get_rule_set(entity_type))

    def aggregate(
        self,
        candidate: Record,
        existing: Record,
        rule_set: RuleSet
    ) -> Optional[DuplicateMatch]:
        """Apply a rule set to one pair and admit it at the threshold."""
        outcome = rule_set.score(candidate, existing)
        if outcome.points < self.config.admission_threshold:
            return None

        return DuplicateMatch(
            id=existing.get(rule_set.entity_type.id_field),
            score=outcome.points,
            matched_fields=outcome.matched_fields,
            record=existing
        )

    def detect(
        self,
        candidate: Record,
        existing_pool: Optional[Sequence[Record]],
        entity_type: Union[EntityType, str]
    ) -> DuplicateDetectionResult:
        """
        Rank the likely duplicates of a candidate record.

        Args:
            candidate: Partial record being created
            existing_pool: Every stored record of the same entity type
            entity_type: 'lead', 'account' or 'contact'

        Returns:
            DuplicateDetectionResult: Top matches, best first, with confidence

        Raises:
            ValueError: If the pool is None or the entity type is unknown
            TypeError: If a pool entry is not a mapping
        """
        start_time = time.time()
        entity_type = EntityType.coerce(entity_type)
        pool = self._validate_pool(existing_pool)
        rule_set = get_rule_set(entity_type)
        if candidate is None:
            candidate = {}

        matches = [
            match for match in self._score_pool(candidate, pool, rule_set)
            if match is not None
        ]
        # sorted() is stable, so equal scores keep pool order
        matches = sorted(matches, key=lambda match: match.score, reverse=True)

        for match in matches:
            self.logger.debug(
                f"{entity_type.label} {match.id} scored {match.score} "
                f"on {', '.join(match.matched_fields)}"
            )

        if not matches:
            result = DuplicateDetectionResult.empty()
        else:
            result = DuplicateDetectionResult(
                has_duplicates=True,
                matches=tuple(matches[:self.config.max_matches]),
                confidence=self._confidence(matches[0].score, entity_type)
            )

        self.logger.info(
            f"Checked {len(pool)} {entity_type.value} records: "
            f"{len(matches)} possible duplicates, confidence={result.confidence.value} "
            f"({time.time() - start_time:.3f} seconds)"
        )
        return result

    def detect_frame(
        self,
        candidate: Record,
        frame: pd.DataFrame,
        entity_type: Union[EntityType, str]
    ) -> DuplicateDetectionResult:
        """
        Rank duplicates from a pool held in a DataFrame, one row per record.

        Missing cells are treated as absent fields.
        """
        if frame is None:
            raise ValueError("Existing record frame must not be None")

        records = [
            {column: value for column, value in row.items() if not is_absent(value)}
            for row in frame.to_dict(orient='records')
        ]
        return self.detect(candidate, records, entity_type)

    def _score_pool(
        self,
        candidate: Record,
        pool: List[Record],
        rule_set: RuleSet
    ) -> Iterable[Optional[DuplicateMatch]]:
        """Aggregate every pool record, in parallel for large pools."""
        def score(existing: Record) -> Optional[DuplicateMatch]:
            return self.aggregate(candidate, existing, rule_set)

        use_threads = (
            self.config.worker_threads > 1 and
            len(pool) >= self.config.parallel_threshold
        )
        if not use_threads:
            return [score(existing) for existing in pool]

        with ThreadPoolExecutor(max_workers=self.config.worker_threads) as executor:
            # map() yields in submission order
            return list(executor.map(score, pool))

    def _confidence(self, top_score: int, entity_type: EntityType) -> Confidence:
        return self.config.thresholds_for(entity_type).classify(top_score)

    @staticmethod
    def _validate_pool(existing_pool: Optional[Sequence[Record]]) -> List[Record]:
        """Reject a missing pool and non-mapping entries."""
        if existing_pool is None:
            raise ValueError("Existing record pool must not be None")

        pool = list(existing_pool)
        for position, record in enumerate(pool):
            if not isinstance(record, Mapping):
                raise TypeError(
                    f"Existing record at position {position} is "
                    f"{type(record).__name__}, expected a mapping"
                )
        return pool


_default_detector: Optional[DuplicateDetector] = None

def _get_default_detector() -> DuplicateDetector:
    global _default_detector
    if _default_detector is None:
        _default_detector = DuplicateDetector()
    return _default_detector

def detect_duplicates(
    candidate: Record,
    existing_pool: Sequence[Record],
    entity_type: Union[EntityType, str]
) -> DuplicateDetectionResult:
    """Detect duplicates with the default configuration."""
    return _get_default_detector().detect(candidate, existing_pool, entity_type)

def detect_duplicate_leads(
    candidate: Record,
    existing_leads: Sequence[Record]
) -> DuplicateDetectionResult:
    return detect_duplicates(candidate, existing_leads, EntityType.LEAD)

def detect_duplicate_accounts(
    candidate: Record,
    existing_accounts: Sequence[Record]
) -> DuplicateDetectionResult:
    return detect_duplicates(candidate, existing_accounts, EntityType.ACCOUNT)

def detect_duplicate_contacts(
    candidate: Record,
    existing_contacts: Sequence[Record]
) -> DuplicateDetectionResult:
    return detect_duplicates(candidate, existing_contacts, EntityType.CONTACT)
