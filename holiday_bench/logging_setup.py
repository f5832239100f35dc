import logging
import logging.handlers
from pathlib import Path
import traceback
from datetime import datetime

from holiday_bench.config import config

class Logger:
    """Logging manager for the store holiday benchmark."""
    
    _instance = None
    _loggers = {}
    
    def __new__(cls):
        """Singleton pattern implementation."""
        if cls._instance is None:
            cls._instance = super(Logger, cls).__new__(cls)
            cls._instance._initialized = False
        return cls._instance
    
    def __init__(self):
        """Initialize the logger if not already initialized."""
        if self._initialized:
            return
        
        self.configure()
        self._initialized = True
    
    def configure(self, level=None):
        """Apply the current logging configuration.
        
        Loggers handed out before this call are reconfigured in place, so the
        CLI can switch level or log directory after parsing its arguments.
        
        Args:
            level: Optional level name overriding the configured one
        """
        self._log_config = dict(config.log_config)
        if level:
            self._log_config['level'] = level
        
        directory = self._log_config['directory']
        self._log_dir = Path(directory) if directory else None
        
        self._configure_root_logger()
        
        for name in list(self._loggers):
            del self._loggers[name]
            self.get_logger(name)
    
    def _level(self):
        level_name = self._log_config['level'].upper()
        return getattr(logging, level_name, logging.INFO)
    
    def _configure_root_logger(self):
        """Configure the root logger."""
        root_logger = logging.getLogger()
        root_logger.setLevel(self._level())
        
        # Remove existing handlers
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)
        
        if self._log_config['console_output']:
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(logging.Formatter(self._log_config['format']))
            root_logger.addHandler(console_handler)
    
    def get_logger(self, name):
        """Get a logger with the specified name.
        
        Args:
            name: Name of the logger
            
        Returns:
            Configured logger instance
        """
        if name in self._loggers:
            return self._loggers[name]
        
        logger = logging.getLogger(name)
        logger.setLevel(self._level())
        
        # Remove existing handlers to prevent duplicates
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
            handler.close()
        
        if self._log_dir is not None:
            self._log_dir.mkdir(parents=True, exist_ok=True)
            log_file = self._log_dir / f"{name}.log"
            file_handler = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=self._log_config['max_size_mb'] * 1024 * 1024,
                backupCount=self._log_config['backup_count']
            )
            file_handler.setFormatter(logging.Formatter(self._log_config['format']))
            logger.addHandler(file_handler)
        
        if self._log_config['console_output']:
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(logging.Formatter(self._log_config['format']))
            logger.addHandler(console_handler)
        
        # Prevent propagation to root logger to avoid duplicates
        logger.propagate = False
        
        self._loggers[name] = logger
        return logger
    
    def log_exception(self, logger_name, exception, message=None):
        """Log an exception with stack trace.
        
        Args:
            logger_name: Logger name
            exception: Exception object
            message: Optional message to include
        """
        logger = self.get_logger(logger_name)
        
        if message:
            logger.error(f"{message}: {str(exception)}")
        else:
            logger.error(str(exception))
        
        logger.error(traceback.format_exc())
    
    def phase_start_log(self, phase_name, additional_info=None):
        """Log the start of a run phase.
        
        Args:
            phase_name: Name of the phase (reset, generate, benchmark...)
            additional_info: Optional additional information
            
        Returns:
            Dictionary with phase logging information
        """
        run_logger = self.get_logger('run')
        
        log_info = {
            'phase_name': phase_name,
            'start_time': datetime.now(),
            'additional_info': additional_info
        }
        
        run_logger.info(f"Starting phase: {phase_name}")
        if additional_info:
            run_logger.info(f"Phase info: {additional_info}")
        
        return log_info
    
    def phase_end_log(self, log_info, success=True, result_info=None):
        """Log the end of a run phase.
        
        Args:
            log_info: Dictionary returned by phase_start_log
            success: Whether the phase succeeded
            result_info: Optional result information
        """
        run_logger = self.get_logger('run')
        
        phase_name = log_info.get('phase_name', 'Unknown')
        duration = datetime.now() - log_info.get('start_time', datetime.now())
        
        if success:
            run_logger.info(f"Completed phase: {phase_name} in {duration}")
        else:
            run_logger.error(f"Failed phase: {phase_name} after {duration}")
        
        if result_info:
            run_logger.info(f"Phase results: {result_info}")

# Global logger instance
logger = Logger()

def get_logger(name):
    """Get a logger with the specified name."""
    return logger.get_logger(name)

def log_exception(logger_name, exception, message=None):
    """Log an exception with stack trace."""
    logger.log_exception(logger_name, exception, message)
