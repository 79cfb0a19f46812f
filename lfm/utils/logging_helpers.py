"""Logging helper utilities for consistent progress reporting."""

import logging
import click

logger = logging.getLogger(__name__)


def log_progress(
    processed: int,
    total: int | None,
    matched: int = 0,
    unmatched: int = 0,
    elapsed_seconds: float = 0.0,
    item_name: str = "items"
) -> None:
    """Log progress info with consistent formatting.

    Args:
        processed: Number of items processed so far
        total: Total number of items (None if unknown)
        matched: Count of items with at least one match
        unmatched: Count of items without any match
        elapsed_seconds: Time elapsed since start
        item_name: Name of items being processed (e.g., "items", "sources")
    """
    parts = [
        f"{click.style(f'{processed}', fg='cyan')} {item_name} processed"
    ]

    if total:
        pct = (processed / total * 100) if total > 0 else 0
        parts[0] = f"{click.style(f'{processed}/{total}', fg='cyan')} {item_name} ({pct:.0f}%)"

    if matched > 0:
        parts.append(f"{click.style(f'{matched} matched', fg='green')}")
    if unmatched > 0:
        parts.append(f"{click.style(f'{unmatched} unmatched', fg='yellow')}")

    if elapsed_seconds > 0:
        rate = processed / elapsed_seconds
        parts.append(f"{rate:.1f} {item_name}/s")

    logger.info(" | ".join(parts))


def format_summary(
    analyzed: int,
    matched: int,
    unmatched: int,
    duration_seconds: float = 0.0,
    scope_name: str = "Scope"
) -> str:
    """Format a one-line batch summary with colored counts."""
    parts = [
        click.style('✓', fg='green'),
        f"{scope_name}:",
        f"{analyzed} analyzed",
        click.style(f'{matched} matched', fg='green'),
        click.style(f'{unmatched} unmatched', fg='yellow'),
    ]

    if duration_seconds > 0:
        parts.append(f"in {duration_seconds:.2f}s")

    return " ".join(parts)


__all__ = ["log_progress", "format_summary"]
