"""Aggregation of per-step cleanup results into the final report."""
from typing import Dict


def aggregate_step_results(step_results: Dict[str, dict]) -> dict:
    """
    Reduce per-step results to totals.

    Args:
        step_results: {step_name: {'deleted': int, 'error'?: str}}

    Returns:
        dict with success, total_deleted, tables_processed, has_errors and
        per_step (the input, untouched)
    """
    has_errors = any(result.get('error') for result in step_results.values())
    total_deleted = sum(result.get('deleted') or 0 for result in step_results.values())

    return {
        'success': not has_errors,
        'total_deleted': total_deleted,
        'tables_processed': len(step_results),
        'has_errors': has_errors,
        'per_step': step_results,
    }


def build_cleanup_report(step_results: Dict[str, dict]) -> dict:
    """Build the JSON-ready cleanup report returned to the caller."""
    totals = aggregate_step_results(step_results)
    total_deleted = totals['total_deleted']
    tables_processed = totals['tables_processed']

    if totals['has_errors']:
        message = (
            f"Cleanup completed with some errors. Deleted {total_deleted} records "
            f"across {tables_processed} tables. Check details for more information."
        )
    else:
        message = (
            f"Database cleanup completed successfully. Deleted {total_deleted} records "
            f"across {tables_processed} tables. All non-demo data has been removed."
        )

    return {
        'success': totals['success'],
        'message': message,
        'results': totals['per_step'],
        'summary': {
            'totalRecordsDeleted': total_deleted,
            'tablesProcessed': tables_processed,
            'hasErrors': totals['has_errors'],
        },
    }
