"""Example usage of the duplicate detection system with a CSV export."""

import pandas as pd
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from crm_dedupe.config.models import DetectionConfig, DuplicateDetectionResult, EntityType
from crm_dedupe.core import matcher
from crm_dedupe.core.analyzer import ResultAnalyzer



def create_crm_detector(worker_threads: int = 1) -> matcher.DuplicateDetector:
    """
    Create a detector configured for interactive record creation.

    Args:
        worker_threads: Threads used to score pools of 1000+ records

    Returns:
        DuplicateDetector: Configured detector instance
    """
    return matcher.DuplicateDetector(
        DetectionConfig(
            worker_threads=worker_threads,
            parallel_threshold=1000
        )
    )

def check_new_record(
    candidate: Dict[str, Any],
    records_file: Path,
    entity_type: EntityType,
    report_file: Optional[Path] = None,
    worker_threads: int = 1
) -> DuplicateDetectionResult:
    """
    Check a record that is about to be created against a CSV export.

    Args:
        candidate: Field values entered so far
        records_file: CSV export of existing records of the same type
        entity_type: Entity type of the candidate and the export
        report_file: Optional path for a CSV report of the matches
        worker_threads: Threads used to score large exports

    Returns:
        DuplicateDetectionResult: Ranked duplicates
    """
    try:
        logging.basicConfig(
            level=logging.INFO,
            format='%(asctime)s - %(levelname)s - %(message)s'
        )

        detector = create_crm_detector(worker_threads=worker_threads)
        analyzer = ResultAnalyzer()

        logging.info(f"Reading existing records: {records_file}")
        existing = pd.read_csv(records_file, dtype=str)

        result = detector.detect_frame(candidate, existing, entity_type)
        analyzer.log_summary(result, entity_type)

        warning = analyzer.summarize(result, entity_type)
        if warning is not None:
            logging.info(warning.title)
            logging.info(warning.confidence_message)
            if warning.block_by_default:
                logging.info(f"Creation blocked until the user picks '{warning.continue_label}'")

        if report_file:
            logging.info(f"Saving match report to: {report_file}")
            analyzer.to_frame(result).to_csv(report_file, index=False)

        return result

    except Exception as e:
        logging.error(f"An error occurred: {e}", exc_info=True)
        raise

if __name__ == "__main__":
    # Example usage
    new_lead = {
        'firstname': 'John',
        'lastname': 'Doe',
        'emailaddress1': 'john@acme.com',
        'companyname': 'Acme Inc',
    }

    check_new_record(
        candidate=new_lead,
        records_file=Path('data/leads.csv'),
        entity_type=EntityType.LEAD,
        report_file=Path('data/lead_duplicates.csv')
    )
