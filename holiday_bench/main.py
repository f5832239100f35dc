import argparse
import random
import sys
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError

from holiday_bench.benchmark import BenchmarkRunner, format_results
from holiday_bench.codec import parse_day
from holiday_bench.config import config
from holiday_bench.db import db, session_scope
from holiday_bench.exceptions import (
    BenchError, BenchmarkError, ConfigError, DatabaseError, GenerationError, SchemaError
)
from holiday_bench.generator import generate_stores
from holiday_bench.logging_setup import logger, get_logger, log_exception
from holiday_bench.schema import reset_schema, table_counts
from holiday_bench.validation import verify_consistency

# CLI option -> [DATABASE] key
DATABASE_OPTIONS = {
    'engine': 'engine',
    'host': 'host',
    'port': 'port',
    'user': 'username',
    'password': 'password',
    'database': 'database',
}

def build_parser():
    """Build the command-line argument parser."""
    parser = argparse.ArgumentParser(
        description='Benchmark a normalized holiday table against a bit-mask column'
    )
    
    parser.add_argument('--config', type=str, help='Path to the settings.ini file')
    parser.add_argument('--init-config', type=str, metavar='PATH',
                        help='Write a default settings file to PATH and exit')
    
    parser.add_argument('--count', type=int, help='Number of stores to generate (default 1000000)')
    parser.add_argument('--weekday', type=str, help='Weekday for the filtered benchmark (default Monday)')
    parser.add_argument('--seed', type=int, help='Random seed for data generation')
    parser.add_argument('--progress-interval', type=int,
                        help='Stores between progress messages (default 10000)')
    parser.add_argument('--verify', action='store_true',
                        help='Check both schemas hold the same closing days before benchmarking')
    
    db_group = parser.add_argument_group('database')
    db_group.add_argument('--url', type=str, help='SQLAlchemy database URL (overrides the options below)')
    db_group.add_argument('--engine', type=str, help='SQLAlchemy driver name (default mysql+pymysql)')
    db_group.add_argument('--host', type=str, help='Database host')
    db_group.add_argument('--port', type=int, help='Database port')
    db_group.add_argument('--user', type=str, help='Database user')
    db_group.add_argument('--password', type=str, help='Database password')
    db_group.add_argument('--database', type=str, help='Database name')
    
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable verbose logging')
    
    return parser

def apply_arguments(args):
    """Fold command-line options into the configuration.
    
    Returns:
        Dictionary with the effective benchmark settings
    """
    for option, key in DATABASE_OPTIONS.items():
        value = getattr(args, option)
        if value is not None:
            config.set('DATABASE', key, value)
    
    if args.count is not None:
        config.set('BENCHMARK', 'store_count', args.count)
    if args.weekday is not None:
        config.set('BENCHMARK', 'weekday', args.weekday)
    if args.seed is not None:
        config.set('BENCHMARK', 'seed', args.seed)
    if args.progress_interval is not None:
        config.set('BENCHMARK', 'progress_interval', args.progress_interval)
    
    settings = config.benchmark_config
    if settings['store_count'] is None or settings['store_count'] < 0:
        raise ConfigError(f"Invalid store count: {config.get('BENCHMARK', 'store_count')}")
    if settings['progress_interval'] is None or settings['progress_interval'] <= 0:
        raise ConfigError(f"Invalid progress interval: {config.get('BENCHMARK', 'progress_interval')}")
    settings['weekday'] = parse_day(settings['weekday'])
    
    return settings

@contextmanager
def run_phase(phase_name, error_class, additional_info=None):
    """Log a phase's start and end, marking it failed when it raises.
    
    Database errors escaping the phase are re-raised as `error_class`, so
    every failure reaching main() is a BenchError.
    """
    phase = logger.phase_start_log(phase_name, additional_info)
    try:
        yield
    except SQLAlchemyError as e:
        logger.phase_end_log(phase, success=False)
        raise error_class(f"Phase '{phase_name}' failed: {str(e)}") from e
    except Exception:
        logger.phase_end_log(phase, success=False)
        raise
    logger.phase_end_log(phase)

def run(args):
    """Reset the schema, generate data and run the benchmarks.
    
    Returns:
        List of BenchmarkResult in execution order
    """
    settings = apply_arguments(args)
    log = get_logger('holiday_bench')
    
    db.initialize(args.url)
    
    with run_phase('reset schema', SchemaError):
        reset_schema(db.engine)
    
    rng = random.Random(settings['seed'])
    with run_phase('generate', GenerationError, {
        'stores': settings['store_count'],
        'seed': settings['seed']
    }):
        with session_scope() as session:
            generation = generate_stores(
                session,
                settings['store_count'],
                rng,
                progress_interval=settings['progress_interval']
            )
        log.info(f"Generation results: {generation}")
    
    if args.verify:
        with run_phase('verify', DatabaseError):
            with session_scope() as session:
                verify_consistency(session)
                log.info(f"Table sizes: {table_counts(session)}")
    
    with run_phase('benchmark', BenchmarkError, {'weekday': settings['weekday'].value}):
        with session_scope() as session:
            results = BenchmarkRunner(session, settings['weekday']).run()
    
    return results

def main(argv=None):
    """Main application entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    
    if args.init_config:
        path = config.write_default(args.init_config)
        print(f"Wrote default settings to {path}")
        return 0
    
    try:
        if args.config:
            config.load(args.config, required=True)
    except ConfigError as e:
        logger.configure('DEBUG' if args.verbose else None)
        get_logger('holiday_bench').error(f"Benchmark aborted: {str(e)}")
        return 1
    
    logger.configure('DEBUG' if args.verbose else None)
    log = get_logger('holiday_bench')
    
    try:
        results = run(args)
    except BenchError as e:
        log_exception('holiday_bench', e, f"Benchmark aborted ({e.__class__.__name__})")
        return 1
    except SQLAlchemyError as e:
        log_exception('holiday_bench', e, "Benchmark aborted (database error)")
        return 1
    except KeyboardInterrupt:
        log.error("Benchmark interrupted by user")
        return 1
    finally:
        db.dispose()
    
    print()
    print(format_results(results))
    print()
    return 0

if __name__ == "__main__":
    sys.exit(main())
