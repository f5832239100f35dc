class BenchError(Exception):
    """Base exception for the store holiday benchmark."""
    
    def __init__(self, message=None, code=None, details=None):
        """Initialize the exception.
        
        Args:
            message: Error message
            code: Error code
            details: Additional error details
        """
        self.message = message or "An error occurred in the store holiday benchmark"
        self.code = code
        self.details = details
        super().__init__(self.message)
    
    def __str__(self):
        """String representation of the error."""
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message
    
    def to_dict(self):
        """Convert the exception to a dictionary."""
        error_dict = {
            'error': self.__class__.__name__,
            'message': self.message,
        }
        
        if self.code:
            error_dict['code'] = self.code
            
        if self.details:
            error_dict['details'] = self.details
            
        return error_dict


class ConfigError(BenchError):
    """Exception raised for configuration errors."""
    
    def __init__(self, message=None, code=None, details=None):
        message = message or "Configuration error"
        super().__init__(message, code, details)


class DatabaseError(BenchError):
    """Exception raised when the database cannot be reached."""
    
    def __init__(self, message=None, code=None, details=None):
        message = message or "Database error"
        super().__init__(message, code, details)


class SchemaError(BenchError):
    """Exception raised when dropping or creating the benchmark tables fails."""
    
    def __init__(self, message=None, code=None, details=None):
        message = message or "Schema error"
        super().__init__(message, code, details)


class GenerationError(BenchError):
    """Exception raised when synthetic store data cannot be inserted."""
    
    def __init__(self, message=None, code=None, details=None):
        message = message or "Data generation error"
        super().__init__(message, code, details)


class BenchmarkError(BenchError):
    """Exception raised when a benchmark query fails."""
    
    def __init__(self, message=None, code=None, details=None):
        message = message or "Benchmark error"
        super().__init__(message, code, details)


class ValidationError(BenchError):
    """Exception raised for invalid input or inconsistent data."""
    
    def __init__(self, message=None, code=None, details=None):
        message = message or "Validation error"
        super().__init__(message, code, details)
