"""Evolution runner for cube packing searches."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from p3d.algorithms.evolution import Evolution, EvolutionResult, StepResult
from p3d.config import SolverConfig, Verbosity
from p3d.monitoring.console import ConsoleReporter
from p3d.monitoring.metrics import (
    EvolutionMetrics,
    GenerationMetrics,
    export_to_csv,
    export_to_json,
    print_summary,
)
from p3d.monitoring.telegram_notifier import (
    format_error,
    format_final_summary,
    format_generation_milestone,
    format_run_start,
    send_telegram,
)

MILESTONE_FRACTION = 0.1


class EvolutionRunner:
    """
    Orchestrates one evolution run.

    Runs the search, reports progress on the console according to the
    configured verbosity, collects metrics, saves results and sends
    Telegram updates.
    """

    def __init__(self, config: SolverConfig, reporter: ConsoleReporter | None = None):
        """
        Initialize the runner.

        Args:
            config: Solver configuration.
            reporter: Console reporter; defaults to one at config.verbosity.
        """
        self.config = config
        self.reporter = reporter or ConsoleReporter(config.verbosity)
        self.results_dir = Path(config.results_dir)

    async def run(self) -> tuple[EvolutionResult, EvolutionMetrics]:
        """
        Run the evolution search to completion.

        Returns:
            The final EvolutionResult and the collected EvolutionMetrics.

        Flow:
            1. Create run ID and metrics, send start notification
            2. Step the evolution; per generation record metrics, print
               progress, send milestone notifications
            3. Mark complete, save results, send final summary

        An exception raised while evolving is re-raised after an error
        notification has been sent.
        """
        run_id = f"run_{datetime.now(timezone.utc).strftime('%Y%m%d_%H%M%S')}"
        metrics = EvolutionMetrics(
            run_id=run_id,
            fitness_mode=self.config.fitness.value,
            population=self.config.population,
            max_generations=self.config.generations,
        )

        if self.config.notify:
            await send_telegram(format_run_start(
                population=self.config.population,
                generations=self.config.generations,
                fitness_mode=self.config.fitness.value,
                seed=self.config.seed,
            ))

        self.reporter.sparse(
            f"Evolution: population {self.config.population}, "
            f"up to {self.config.generations} generations, "
            f"fitness {self.config.fitness.value}"
        )

        milestone = max(1, int(self.config.generations * MILESTONE_FRACTION))
        evolution = Evolution(self.config)

        try:
            evolution.initialize()
            reason: str | None = None
            while reason is None:
                step = evolution.step()
                metrics.add_generation(GenerationMetrics(
                    generation=step.generation,
                    average_fitness=step.average_fitness,
                    best_fitness=step.best_fitness,
                    duration_seconds=step.duration_seconds,
                ))
                self._report_step(step)

                if self.config.notify and step.generation % milestone == 0:
                    await send_telegram(format_generation_milestone(
                        generation=step.generation,
                        max_generations=self.config.generations,
                        average_fitness=step.average_fitness,
                        best_fitness=step.best_fitness,
                    ))
                reason = evolution.stop_reason()
        except Exception as exc:
            if self.config.notify:
                await send_telegram(format_error(
                    type(exc).__name__,
                    str(exc),
                    {"run_id": run_id, "generation": evolution.generation},
                ))
            raise

        result = EvolutionResult(
            stop_reason=reason,
            last_step=step,
            processing_seconds=sum(g.duration_seconds for g in metrics.generation_metrics),
        )

        metrics.best_combinations = [p.encode_combination() for p in result.best_genome]
        metrics.mark_complete(result.stop_reason)

        self.reporter.sparse(result.stop_reason)
        self.reporter.sparse(
            f"Final result after {metrics.runtime_seconds:.2f}s: generation: {result.last_step.generation}, "
            f"best solution with fitness {result.best_fitness} found in generation "
            f"{result.last_step.best_generation}"
        )
        self.reporter.normal(print_summary(metrics))

        if self.config.save_results:
            self._save_results(metrics)

        if self.config.notify:
            await send_telegram(format_final_summary(
                generations_run=metrics.generations_run,
                best_fitness=metrics.best_fitness,
                best_generation=metrics.best_generation,
                runtime_seconds=metrics.runtime_seconds,
                stop_reason=result.stop_reason,
            ))

        return result, metrics

    def _report_step(self, step: StepResult) -> None:
        self.reporter.normal(
            f"Step: generation: {step.generation}, average_fitness: {step.average_fitness}, "
            f"best fitness: {step.best_fitness}, duration: {step.duration_seconds * 1000:.1f}ms"
        )
        if self.reporter.enabled(Verbosity.VERBOSE):
            combos = ", ".join(str(p.encode_combination()) for p in step.best_genome)
            self.reporter.verbose(f"      best combinations: [{combos}]")

    def _save_results(self, metrics: EvolutionMetrics) -> None:
        """Save metrics to JSON (summary + generations) and CSV (generations)."""
        json_path = self.results_dir / f"{metrics.run_id}.json"
        export_to_json(metrics, json_path, include_generations=True)

        csv_path = self.results_dir / f"{metrics.run_id}_generations.csv"
        export_to_csv(metrics, csv_path)

        self.reporter.sparse(f"Saved results to {json_path} and {csv_path}")
