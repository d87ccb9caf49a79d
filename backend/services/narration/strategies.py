"""Layered strategy for bulk script generation: one batch call, then per-slide fallback."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence

from shared.exceptions import InvalidCredentialError
from shared.logging_utils import setup_logging

logger = setup_logging("script-batch-strategy")

BatchCall = Callable[[], Awaitable[list[str]]]
SingleCall = Callable[[str], Awaitable[None]]
ApplyResults = Callable[[dict[str, str]], None]


class BatchScriptStrategy:
    """
    Generate scripts for ``slide_ids`` in one request, falling back to
    sequential single-slide generation when the batch fails.
    """

    def __init__(
        self,
        slide_ids: Sequence[str],
        batch_call: BatchCall,
        apply_results: ApplyResults,
        single_call: SingleCall,
    ):
        self.slide_ids = list(slide_ids)
        self.batch_call = batch_call
        self.apply_results = apply_results
        self.single_call = single_call

    async def try_batch(self) -> dict[str, str] | None:
        """Return scripts keyed by slide id, or None if the batch failed."""
        try:
            scripts = await self.batch_call()
        except InvalidCredentialError:
            raise
        except Exception as exc:
            logger.warning(f"Batch script generation failed, falling back to sequential: {exc}")
            return None

        if len(scripts) != len(self.slide_ids):
            logger.warning(
                f"Batch returned {len(scripts)} scripts for {len(self.slide_ids)} slides, "
                "falling back to sequential"
            )
            return None
        return dict(zip(self.slide_ids, scripts))

    async def try_sequential_fallback(self) -> None:
        """Generate each slide on its own, in timeline order."""
        for slide_id in self.slide_ids:
            await self.single_call(slide_id)

    async def run(self) -> bool:
        """Run the batch, or the fallback when it fails. Returns True if the batch succeeded."""
        results = await self.try_batch()
        if results is None:
            await self.try_sequential_fallback()
            return False
        self.apply_results(results)
        return True
