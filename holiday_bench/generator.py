"""
Synthetic store data for the holiday benchmark.

Each store gets a random, non-empty set of closing days which is written
twice: as store_holiday rows (normalized) and as a store_bitflag mask
(denormalized). Both representations are built from the same drawn days.
"""
import random
import time
from dataclasses import dataclass
from typing import List

from sqlalchemy.exc import SQLAlchemyError

from holiday_bench.codec import encode
from holiday_bench.exceptions import GenerationError, ValidationError
from holiday_bench.logging_setup import get_logger
from holiday_bench.models import DayOfWeek, Store, StoreBitflag, StoreHoliday, WEEKDAYS

logger = get_logger('generator')

DEFAULT_PROGRESS_INTERVAL = 10000


@dataclass
class GenerationResult:
    """Row counts written by one generate_stores call."""
    stores: int = 0
    holiday_rows: int = 0
    bitflag_rows: int = 0
    elapsed_seconds: float = 0.0


def store_name(index: int) -> str:
    return f"Store {index}"


def choose_closing_days(rng: random.Random) -> List[DayOfWeek]:
    """Pick a uniformly random, non-empty subset of the weekdays.
    
    The subset size is drawn uniformly from 1..7, then that many days are
    taken from a shuffled copy of the week.
    """
    count = rng.randint(1, len(WEEKDAYS))
    days = list(WEEKDAYS)
    rng.shuffle(days)
    return days[:count]


def generate_stores(session, count: int, rng: random.Random,
                    progress_interval: int = DEFAULT_PROGRESS_INTERVAL) -> GenerationResult:
    """Insert `count` synthetic stores into both schema variants.
    
    Nothing is committed here: the caller owns the transaction (normally a
    session_scope()), so the whole data set commits or rolls back as one.
    Pending rows are flushed every `progress_interval` stores and the
    session is cleared afterwards to keep memory flat for large counts.
    
    Args:
        session: SQLAlchemy session inside an open transaction
        count: Number of stores to create
        rng: Random generator used for every draw
        progress_interval: Stores between flushes / progress log lines
        
    Returns:
        GenerationResult with the number of rows written per table
        
    Raises:
        ValidationError: If count or progress_interval is invalid
        GenerationError: If an insert fails
    """
    if isinstance(count, bool) or not isinstance(count, int) or count < 0:
        raise ValidationError(f"Store count must be a non-negative integer, got {count!r}")
    if not isinstance(progress_interval, int) or progress_interval <= 0:
        raise ValidationError(f"Progress interval must be a positive integer, got {progress_interval!r}")
    
    logger.info(f"Generating {count} stores...")
    result = GenerationResult()
    start = time.perf_counter()
    
    for index in range(1, count + 1):
        name = store_name(index)
        days = choose_closing_days(rng)
        
        store = Store(name=name)
        store.holidays = [StoreHoliday(day_of_week=day) for day in days]
        session.add(store)
        session.add(StoreBitflag(name=name, holidays=encode(days)))
        
        result.stores += 1
        result.holiday_rows += len(days)
        result.bitflag_rows += 1
        
        if index % progress_interval == 0:
            _flush(session, index)
            logger.info(f"Inserted {index}/{count} stores")
    
    if count % progress_interval:
        _flush(session, count)
    
    result.elapsed_seconds = time.perf_counter() - start
    logger.info(
        f"Generated {result.stores} stores, {result.holiday_rows} holiday rows "
        f"and {result.bitflag_rows} bitflag rows in {result.elapsed_seconds:.3f}s"
    )
    return result


def _flush(session, index):
    try:
        session.flush()
    except SQLAlchemyError as e:
        raise GenerationError(
            f"Failed to insert stores up to {store_name(index)}: {str(e)}",
            details={'store_index': index}
        ) from e
    session.expunge_all()
