"""
Utilities Package
=================
Helper functions, profiling, and logging.
"""

from .helpers import (
    setup_logging,
    setup_phase_logger,
    logger,
    Profiler,
    profiler,
    profile_step,
    profile_function,
    extract_page_number,
    extract_category,
    resolve_url,
    build_page_url,
    build_export_filename,
    calculate_data_schema,
    get_priority_columns,
    reorder_dataframe_columns
)

__all__ = [
    'setup_logging',
    'setup_phase_logger',
    'logger',
    'Profiler',
    'profiler',
    'profile_step',
    'profile_function',
    'extract_page_number',
    'extract_category',
    'resolve_url',
    'build_page_url',
    'build_export_filename',
    'calculate_data_schema',
    'get_priority_columns',
    'reorder_dataframe_columns'
]
