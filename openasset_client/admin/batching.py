"""Batch planning for bulk file updates."""

from dataclasses import dataclass, replace
from typing import List, Sequence, Tuple


@dataclass(frozen=True)
class BatchPlan:
    """One slice of an album's file ids."""
    offset: int
    batch_index: int
    batch_size: int
    total_count: int
    iterations: int
    file_ids: Tuple[int, ...] = ()

    @property
    def progress(self) -> str:
        return f"{self.batch_index}/{self.iterations}"


@dataclass(frozen=True)
class MigrationProgress:
    """Running totals carried from one batch to the next."""
    files_updated: int = 0
    batch_index: int = 0
    failed_batches: Tuple[int, ...] = ()

    def advance(self, plan: BatchPlan, failed: bool = False) -> "MigrationProgress":
        """Return the totals after ``plan`` has been submitted.

        The batch counts towards ``files_updated`` even when its request
        failed; failures are listed in ``failed_batches``.
        """
        failed_batches = self.failed_batches
        if failed:
            failed_batches += (plan.batch_index,)
        return replace(
            self,
            files_updated=self.files_updated + len(plan.file_ids),
            batch_index=plan.batch_index,
            failed_batches=failed_batches,
        )


def count_iterations(total_count: int, batch_size: int) -> int:
    iterations, remainder = divmod(total_count, batch_size)
    if remainder:
        iterations += 1
    return iterations


def plan_batches(file_ids: Sequence[int], batch_size: int) -> List[BatchPlan]:
    """Split file ids into consecutive batches of ``batch_size``.

    Args:
        file_ids: Ordered file ids
        batch_size: Positive batch size

    Returns:
        Batches numbered from 1; the last one may be shorter
    """
    if batch_size <= 0:
        raise ValueError(f"batch_size must be positive, got {batch_size}")

    total_count = len(file_ids)
    iterations = count_iterations(total_count, batch_size)

    return [
        BatchPlan(
            offset=offset,
            batch_index=number,
            batch_size=batch_size,
            total_count=total_count,
            iterations=iterations,
            file_ids=tuple(file_ids[offset:offset + batch_size]),
        )
        for number, offset in enumerate(range(0, total_count, batch_size), 1)
    ]
