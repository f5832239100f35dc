from typing import Dict, List

from sqlalchemy import func, inspect, select
from sqlalchemy.exc import SQLAlchemyError

from holiday_bench.exceptions import SchemaError
from holiday_bench.logging_setup import get_logger
from holiday_bench.models import Base, BENCHMARK_TABLES

logger = get_logger('schema')

def reset_schema(engine):
    """Drop and recreate the store, store_holiday and store_bitflag tables.
    
    Tables are dropped child-first (store_bitflag, store_holiday, store) so
    the foreign key from store_holiday to store never blocks the drop.
    
    Args:
        engine: SQLAlchemy engine
        
    Raises:
        SchemaError: If any DDL statement fails
    """
    try:
        for table in BENCHMARK_TABLES:
            logger.info(f"Dropping table {table.name}")
            table.drop(engine, checkfirst=True)
        
        logger.info("Creating benchmark tables...")
        Base.metadata.create_all(engine)
    except SQLAlchemyError as e:
        raise SchemaError(f"Failed to reset benchmark schema: {str(e)}") from e
    
    logger.info("Benchmark tables created successfully.")

def table_names(engine) -> List[str]:
    """Return the benchmark tables that currently exist in the database."""
    existing = set(inspect(engine).get_table_names())
    return [table.name for table in reversed(BENCHMARK_TABLES) if table.name in existing]

def table_counts(session) -> Dict[str, int]:
    """Return the number of rows in each benchmark table."""
    return {
        table.name: session.execute(select(func.count()).select_from(table)).scalar_one()
        for table in reversed(BENCHMARK_TABLES)
    }
