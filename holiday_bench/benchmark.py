"""
Paired benchmark queries against the normalized and bit-mask schemas.

Two access patterns are measured, each once per schema:

1. select all stores with their closing days
2. select the stores closed on one weekday

Elapsed time is measured with time.perf_counter() from just before the
statement is executed until every result row has been fetched, so the
timings include result-set materialization on the client.
"""
import time
from dataclasses import dataclass
from typing import Dict, List

from sqlalchemy import String, cast, func, select
from sqlalchemy.exc import SQLAlchemyError
from tabulate import tabulate

from holiday_bench.codec import day_bit, parse_day
from holiday_bench.exceptions import BenchmarkError
from holiday_bench.logging_setup import get_logger
from holiday_bench.models import DayOfWeek, Store, StoreBitflag, StoreHoliday

logger = get_logger('benchmark')

NORMALIZED = 'normalized'
BITFLAG = 'bitflag'

SELECT_ALL = 'select all'


@dataclass
class BenchmarkResult:
    """Timing of one benchmark query."""
    benchmark: str
    schema: str
    elapsed_seconds: float
    row_count: int

    def to_dict(self) -> Dict:
        return {
            'benchmark': self.benchmark,
            'schema': self.schema,
            'elapsed_seconds': self.elapsed_seconds,
            'row_count': self.row_count
        }


class BenchmarkRunner:
    """Runs the four benchmark queries on one session."""

    def __init__(self, session, weekday=DayOfWeek.MONDAY):
        self.session = session
        self.weekday = parse_day(weekday)

    @property
    def weekday_benchmark(self) -> str:
        return f"select where {self.weekday.value}"

    def _concat_days(self):
        """Aggregate of a store's weekday labels for the current dialect."""
        dialect = self.session.get_bind().dialect.name
        if dialect == 'postgresql':
            return func.string_agg(cast(StoreHoliday.day_of_week, String), ',')
        return func.group_concat(StoreHoliday.day_of_week, type_=String)

    def normalized_all_query(self):
        return (
            select(Store.id, Store.name, self._concat_days().label('holidays'))
            .outerjoin(StoreHoliday, Store.id == StoreHoliday.store_id)
            .group_by(Store.id, Store.name)
        )

    def bitflag_all_query(self):
        return select(StoreBitflag.id, StoreBitflag.name, StoreBitflag.holidays)

    def normalized_weekday_query(self):
        return (
            select(Store.id, Store.name)
            .join(StoreHoliday, Store.id == StoreHoliday.store_id)
            .where(StoreHoliday.day_of_week == self.weekday)
        )

    def bitflag_weekday_query(self):
        return (
            select(StoreBitflag.id, StoreBitflag.name, StoreBitflag.holidays)
            .where(StoreBitflag.holidays.op('&')(day_bit(self.weekday)) != 0)
        )

    def time_query(self, benchmark: str, schema: str, statement) -> BenchmarkResult:
        """Execute a statement, fetch every row and record the elapsed time.

        Raises:
            BenchmarkError: If the query fails
        """
        try:
            start = time.perf_counter()
            rows = self.session.execute(statement).all()
            elapsed = time.perf_counter() - start
        except SQLAlchemyError as e:
            raise BenchmarkError(
                f"{benchmark} ({schema}) query failed: {str(e)}",
                details={'benchmark': benchmark, 'schema': schema}
            ) from e

        result = BenchmarkResult(benchmark, schema, elapsed, len(rows))
        logger.info(f"{benchmark.upper()} ({schema}) done: {elapsed:.6f}s, {len(rows)} rows")
        return result

    def select_all(self) -> List[BenchmarkResult]:
        """Time fetching every store with its closing days, in both schemas."""
        return [
            self.time_query(SELECT_ALL, NORMALIZED, self.normalized_all_query()),
            self.time_query(SELECT_ALL, BITFLAG, self.bitflag_all_query()),
        ]

    def select_weekday(self) -> List[BenchmarkResult]:
        """Time fetching the stores closed on the target weekday, in both schemas."""
        return [
            self.time_query(self.weekday_benchmark, NORMALIZED, self.normalized_weekday_query()),
            self.time_query(self.weekday_benchmark, BITFLAG, self.bitflag_weekday_query()),
        ]

    def run(self) -> List[BenchmarkResult]:
        """Run both benchmarks; results come back in execution order."""
        logger.info("Running performance tests...")
        return self.select_all() + self.select_weekday()


def format_results(results: List[BenchmarkResult]) -> str:
    """Render benchmark results as a table.

    Bitflag rows carry the speedup relative to the normalized query of the
    same benchmark (normalized time / bitflag time).
    """
    normalized_times = {
        r.benchmark: r.elapsed_seconds for r in results if r.schema == NORMALIZED
    }

    table = []
    for r in results:
        speedup = '-'
        baseline = normalized_times.get(r.benchmark)
        if r.schema == BITFLAG and baseline is not None and r.elapsed_seconds > 0:
            speedup = f"{baseline / r.elapsed_seconds:.2f}x"
        table.append([r.benchmark, r.schema, r.row_count, f"{r.elapsed_seconds:.6f}", speedup])

    return tabulate(table, headers=['Benchmark', 'Schema', 'Rows', 'Elapsed (s)', 'Speedup'])
