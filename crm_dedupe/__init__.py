"""
CRM Duplicate Detection
=======================

Checks a lead, account or contact that is about to be created against the
existing records of the same kind and reports the likely duplicates.

Key Features:
- Normalized, tiered string similarity scoring
- Per-entity weighted field rules (leads, accounts, contacts)
- Ranked, truncated results with a confidence level
- DataFrame pools and optional thread-pool scoring for large pools
- Warning summaries for callers that block, merge or continue
"""

from crm_dedupe.core.matcher import (
    DuplicateDetector,
    detect_duplicates,
    detect_duplicate_leads,
    detect_duplicate_accounts,
    detect_duplicate_contacts
)
from crm_dedupe.core.analyzer import DuplicateWarning, ResultAnalyzer

from crm_dedupe.config.models import (
    Confidence,
    ConfidenceThresholds,
    DetectionConfig,
    DuplicateDetectionResult,
    DuplicateMatch,
    EntityType
)
from crm_dedupe.config.rules import RuleSet, get_rule_set

__version__ = "1.0.0"
