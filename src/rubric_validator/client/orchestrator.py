"""Sequential analysis of a block of rubric criteria.

An AnalysisOrchestrator owns one AnalysisRun at a time. ``analyze`` splits
the criteria block into lines, creates one loading record per criterion,
then evaluates the criteria strictly in order: request i+1 is not sent until
request i has settled. Each outcome lands on its own record only, and a
failed criterion never stops the run.

Runs move through idle -> running(index) -> done. Every run gets a new
generation number; a result that comes back after a newer run has started
belongs to a superseded generation and is dropped, and the superseded loop
sends nothing further.
"""

from collections.abc import Callable
from enum import Enum
from typing import Protocol

from pydantic import BaseModel, Field

from ..logging import logger
from ..schemas.verdict import Verdict
from .api_client import CriterionRequestError

MISSING_INPUT_MESSAGE = "Please provide both the original prompt and the rubric criteria"
NO_CRITERIA_MESSAGE = "No valid criteria found"


class Evaluator(Protocol):
    async def evaluate(self, prompt: str, criterion: str) -> Verdict: ...


class RunState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    DONE = "done"


class CriterionRecord(BaseModel):
    criterion_text: str
    verdict: Verdict | None = None
    is_expanded: bool = False
    is_loading: bool = True
    error_message: str | None = None


class AnalysisRun(BaseModel):
    generation: int = 0
    state: RunState = RunState.IDLE
    current_index: int | None = None
    records: list[CriterionRecord] = Field(default_factory=list)
    error: str = ""

    @property
    def in_progress(self) -> bool:
        return self.state == RunState.RUNNING


def split_criteria(block: str) -> list[str]:
    """Non-blank lines of ``block``, trimmed, in order. Duplicates are kept."""
    return [line.strip() for line in block.splitlines() if line.strip()]


class AnalysisOrchestrator:
    def __init__(
        self,
        evaluator: Evaluator,
        on_change: Callable[[AnalysisRun], None] | None = None,
    ):
        self.evaluator = evaluator
        self.on_change = on_change
        self.run = AnalysisRun()
        self._generation = 0

    @property
    def records(self) -> list[CriterionRecord]:
        return self.run.records

    @property
    def in_progress(self) -> bool:
        return self.run.in_progress

    @property
    def error(self) -> str:
        return self.run.error

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change(self.run)

    def _next_generation(self) -> int:
        self._generation += 1
        return self._generation

    def _reject(self, message: str) -> None:
        self.run = AnalysisRun(generation=self._next_generation(), error=message)
        self._notify()

    def _is_current(self, generation: int) -> bool:
        return self.run.generation == generation

    async def analyze(self, prompt: str, raw_criteria: str) -> None:
        if not prompt.strip() or not raw_criteria.strip():
            self._reject(MISSING_INPUT_MESSAGE)
            return

        criteria = split_criteria(raw_criteria)
        # Only reachable if split_criteria ever drops a non-blank line.
        if not criteria:
            self._reject(NO_CRITERIA_MESSAGE)
            return

        prompt = prompt.strip()
        generation = self._next_generation()
        self.run = AnalysisRun(
            generation=generation,
            state=RunState.RUNNING,
            records=[CriterionRecord(criterion_text=c) for c in criteria],
        )
        self._notify()

        for index, criterion in enumerate(criteria):
            self.run.current_index = index
            verdict: Verdict | None = None
            error_message: str | None = None
            try:
                verdict = await self.evaluator.evaluate(prompt, criterion)
            except CriterionRequestError as e:
                error_message = e.message
            except Exception as e:
                logger.error(f"Error analyzing criterion {index + 1}: {e}")
                error_message = str(e) or "Failed to analyze criterion"

            if not self._is_current(generation):
                logger.info(
                    f"Discarding result for criterion {index + 1} of superseded run {generation}"
                )
                return

            record = self.run.records[index]
            record.verdict = verdict
            record.error_message = error_message
            record.is_loading = False
            self._notify()

        self.run.current_index = None
        self.run.state = RunState.DONE
        self._notify()

    def toggle_expanded(self, index: int) -> None:
        if not 0 <= index < len(self.run.records):
            logger.warning(f"toggle_expanded: no record at index {index}")
            return
        record = self.run.records[index]
        record.is_expanded = not record.is_expanded
        self._notify()
