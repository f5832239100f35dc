import os
import configparser
from pathlib import Path

from sqlalchemy.engine import URL

from holiday_bench.exceptions import ConfigError

DEFAULT_CONFIG_PATH = Path('config') / 'settings.ini'

DEFAULT_SETTINGS = {
    'DATABASE': {
        'engine': 'mysql+pymysql',
        'host': '127.0.0.1',
        'port': '3306',
        'database': 'test_db',
        'username': 'test_user',
        'password': 'test_pass',
        'echo': 'False'
    },
    'LOGGING': {
        'level': 'INFO',
        'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        'directory': 'logs',
        'max_size_mb': '10',
        'backup_count': '5',
        'console_output': 'True'
    },
    'BENCHMARK': {
        'store_count': '1000000',
        'weekday': 'Monday',
        'seed': '',
        'progress_interval': '10000'
    }
}

# Environment variables that override the [DATABASE] section
DATABASE_ENV_OVERRIDES = {
    'engine': 'DB_ENGINE',
    'host': 'DB_HOST',
    'port': 'DB_PORT',
    'database': 'DB_NAME',
    'username': 'DB_USERNAME',
    'password': 'DB_PASSWORD',
}

REQUIRED_DATABASE_KEYS = ('engine', 'host', 'port', 'database', 'username', 'password')


class Config:
    """Configuration manager for the store holiday benchmark."""
    
    _instance = None
    
    def __new__(cls):
        """Singleton pattern implementation."""
        if cls._instance is None:
            cls._instance = super(Config, cls).__new__(cls)
            cls._instance._initialized = False
        return cls._instance
    
    def __init__(self):
        """Initialize the configuration if not already initialized."""
        if self._initialized:
            return
        
        self._config = None
        self._config_path = None
        self.load(os.environ.get('HOLIDAY_BENCH_CONFIG', DEFAULT_CONFIG_PATH))
        
        self._initialized = True
    
    def load(self, path=None, required=False):
        """(Re)load configuration from defaults, an INI file and the environment.
        
        Args:
            path: Path to the settings file. Unless required, a missing file
                  is not an error and the built-in defaults apply.
            required: Raise when the settings file does not exist
        
        Raises:
            ConfigError: If required is set and the file is missing
        """
        if required and (path is None or not Path(path).is_file()):
            raise ConfigError(f"Settings file not found: {path}", details={'path': str(path)})
        
        self._config = configparser.ConfigParser(interpolation=None)
        self._config.read_dict(DEFAULT_SETTINGS)
        
        if path is not None:
            self._config_path = Path(path)
            if self._config_path.exists():
                self._config.read(self._config_path)
        
        for key, env_var in DATABASE_ENV_OVERRIDES.items():
            value = os.environ.get(env_var)
            if value:
                self._config.set('DATABASE', key, value)
    
    def write_default(self, path=None):
        """Write the default configuration to a file."""
        path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
        path.parent.mkdir(parents=True, exist_ok=True)
        
        defaults = configparser.ConfigParser(interpolation=None)
        defaults.read_dict(DEFAULT_SETTINGS)
        with open(path, 'w') as configfile:
            defaults.write(configfile)
        return path
    
    @property
    def path(self):
        """Path of the settings file last loaded."""
        return self._config_path
    
    def get(self, section, key, default=None):
        """Get configuration value."""
        try:
            return self._config.get(section, key)
        except (configparser.NoSectionError, configparser.NoOptionError):
            return default
    
    def get_int(self, section, key, default=None):
        """Get configuration value as integer."""
        try:
            return self._config.getint(section, key)
        except (configparser.NoSectionError, configparser.NoOptionError, ValueError):
            return default
    
    def get_float(self, section, key, default=None):
        """Get configuration value as float."""
        try:
            return self._config.getfloat(section, key)
        except (configparser.NoSectionError, configparser.NoOptionError, ValueError):
            return default
    
    def get_boolean(self, section, key, default=None):
        """Get configuration value as boolean."""
        try:
            return self._config.getboolean(section, key)
        except (configparser.NoSectionError, configparser.NoOptionError, ValueError):
            return default
    
    def set(self, section, key, value):
        """Set configuration value for the running process (not persisted)."""
        if not self._config.has_section(section):
            self._config.add_section(section)
        
        self._config.set(section, key, str(value))
    
    def get_db_url(self):
        """Generate the SQLAlchemy database URL.
        
        Raises:
            ConfigError: If a connection setting is missing or the port is not numeric
        """
        missing = [key for key in REQUIRED_DATABASE_KEYS if not self.get('DATABASE', key)]
        if missing:
            raise ConfigError(
                f"Missing database settings: {', '.join(missing)}",
                details={'missing': missing}
            )
        
        port = self.get_int('DATABASE', 'port')
        if port is None:
            raise ConfigError(f"Invalid database port: {self.get('DATABASE', 'port')}")
        
        return URL.create(
            drivername=self.get('DATABASE', 'engine'),
            username=self.get('DATABASE', 'username'),
            password=self.get('DATABASE', 'password'),
            host=self.get('DATABASE', 'host'),
            port=port,
            database=self.get('DATABASE', 'database'),
        )
    
    @property
    def log_config(self):
        """Get logging configuration."""
        return {
            'level': self.get('LOGGING', 'level', 'INFO'),
            'format': self.get('LOGGING', 'format', '%(asctime)s - %(name)s - %(levelname)s - %(message)s'),
            'directory': self.get('LOGGING', 'directory', 'logs'),
            'max_size_mb': self.get_int('LOGGING', 'max_size_mb', 10),
            'backup_count': self.get_int('LOGGING', 'backup_count', 5),
            'console_output': self.get_boolean('LOGGING', 'console_output', True)
        }
    
    @property
    def benchmark_config(self):
        """Get benchmark run configuration."""
        seed = self.get('BENCHMARK', 'seed', '')
        if seed:
            try:
                seed = int(seed)
            except ValueError:
                raise ConfigError(f"Invalid seed: {seed}")
        else:
            seed = None
        
        return {
            'store_count': self.get_int('BENCHMARK', 'store_count', 1000000),
            'weekday': self.get('BENCHMARK', 'weekday', 'Monday'),
            'seed': seed,
            'progress_interval': self.get_int('BENCHMARK', 'progress_interval', 10000)
        }

# Global config instance
config = Config()
