class DedupeError(Exception):
    pass

class ConfigError(DedupeError):
    """Configuration file or option is invalid."""
    pass

# I/O errors are fatal for the run
class DedupeIOError(DedupeError):
    pass

class InputOpenError(DedupeIOError):
    pass

class InputReadError(DedupeIOError):
    """Reading the input stream failed mid-run. Output written so far stays."""
    pass

class OutputOpenError(DedupeIOError):
    pass

class OutputWriteError(DedupeIOError):
    pass

class UpdateCheckError(DedupeError):
    """Fetching the latest released version failed."""
    pass
