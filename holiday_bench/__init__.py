from .config import config
from .db import db, session_scope
from .logging_setup import logger, get_logger
from .exceptions import (
    BenchError, ConfigError, DatabaseError, SchemaError,
    GenerationError, BenchmarkError, ValidationError
)

__all__ = [
    'config',
    'db',
    'session_scope',
    'logger',
    'get_logger',
    'BenchError',
    'ConfigError',
    'DatabaseError',
    'SchemaError',
    'GenerationError',
    'BenchmarkError',
    'ValidationError'
]
