from tests.base import quiet_logging

quiet_logging()
