"""Lightweight Telegram notification for evolution run progress.

Sends plain-text messages to a Telegram channel via the Bot API for:
- Run start notifications
- Generation milestones
- Errors
- Final results summary

No retry logic; progress updates are non-critical.
"""

from __future__ import annotations

import os
from typing import Any

import httpx


TELEGRAM_API = "https://api.telegram.org/bot{token}/sendMessage"


async def send_telegram(
    message: str,
    chat_id: str | None = None,
    token: str | None = None,
) -> bool:
    """Send a plain-text message to a Telegram channel.

    Args:
        message: Text to send.
        chat_id: Telegram chat ID. Defaults to TELEGRAM_CHAT_ID env var.
        token: Bot token. Defaults to TELEGRAM_BOT_TOKEN env var.

    Returns:
        True if message was sent successfully, False otherwise (including
        when no token or chat ID is configured).
    """
    token = token or os.environ.get("TELEGRAM_BOT_TOKEN", "")
    if not token:
        return False

    chat_id = chat_id or os.environ.get("TELEGRAM_CHAT_ID", "")
    if not chat_id:
        return False

    url = TELEGRAM_API.format(token=token)
    payload = {"chat_id": chat_id, "text": message}

    try:
        async with httpx.AsyncClient(timeout=10.0) as client:
            resp = await client.post(url, json=payload)
            data = resp.json()
            return bool(data.get("ok", False))
    except (httpx.HTTPError, ValueError):
        return False


def format_run_start(
    population: int,
    generations: int,
    fitness_mode: str,
    seed: int | None = None,
) -> str:
    """Format run start notification message.

    Example:
        >>> print(format_run_start(200, 500, "coverage", seed=7))
        🚀 Evolution Started
        Fitness: coverage
        Population: 200
        Generations: up to 500
        Seed: 7
    """
    return (
        f"🚀 Evolution Started\n"
        f"Fitness: {fitness_mode}\n"
        f"Population: {population}\n"
        f"Generations: up to {generations}\n"
        f"Seed: {seed if seed is not None else 'random'}"
    )


def format_generation_milestone(
    generation: int,
    max_generations: int,
    average_fitness: int,
    best_fitness: int,
) -> str:
    """Format generation milestone notification.

    Example:
        >>> print(format_generation_milestone(50, 200, 31, 44))
        📊 Progress Update
        Generation: 50/200 (25%)
        Average fitness: 31
        Best fitness: 44
    """
    progress_pct = (generation / max_generations) * 100
    return (
        f"📊 Progress Update\n"
        f"Generation: {generation}/{max_generations} ({progress_pct:.0f}%)\n"
        f"Average fitness: {average_fitness}\n"
        f"Best fitness: {best_fitness}"
    )


def format_error(error_type: str, error_message: str, context: dict[str, Any] | None = None) -> str:
    """Format error notification message.

    Example:
        >>> print(format_error("ConfigError", "Config file not found", {"path": "p3d.yaml"}))
        ⚠️ Error: ConfigError
        Config file not found
        Context: path=p3d.yaml
    """
    lines = [
        f"⚠️ Error: {error_type}",
        error_message,
    ]
    if context:
        ctx_str = ", ".join(f"{k}={v}" for k, v in context.items())
        lines.append(f"Context: {ctx_str}")
    return "\n".join(lines)


def format_final_summary(
    generations_run: int,
    best_fitness: int,
    best_generation: int,
    runtime_seconds: float,
    stop_reason: str,
) -> str:
    """Format final run results summary.

    Example:
        >>> print(format_final_summary(120, 57, 98, 90, "Generation limit reached"))
        ✅ Evolution Complete
        Generations: 120
        Best fitness: 57 (generation 98)
        Runtime: 1.5 minutes
        Stop reason: Generation limit reached
    """
    runtime_minutes = runtime_seconds / 60
    return (
        f"✅ Evolution Complete\n"
        f"Generations: {generations_run}\n"
        f"Best fitness: {best_fitness} (generation {best_generation})\n"
        f"Runtime: {runtime_minutes:.1f} minutes\n"
        f"Stop reason: {stop_reason}"
    )
