"""Monitoring module for p3d.

Provides console output, Telegram notifications and metrics tracking for
evolution runs.
"""

from .console import ConsoleReporter
from .metrics import (
    EvolutionMetrics,
    GenerationMetrics,
    export_to_csv,
    export_to_json,
    print_summary,
)
from .telegram_notifier import (
    format_error,
    format_final_summary,
    format_generation_milestone,
    format_run_start,
    send_telegram,
)

__all__ = [
    # Console
    "ConsoleReporter",
    # Metrics
    "EvolutionMetrics",
    "GenerationMetrics",
    "export_to_csv",
    "export_to_json",
    "print_summary",
    # Telegram
    "send_telegram",
    "format_run_start",
    "format_generation_milestone",
    "format_error",
    "format_final_summary",
]
