"""
Error types shared by the logger and the lock primitives.

ResourceFailure never reaches a caller of the logging methods; it is what
the error sink receives. TooManyLocks is raised to whoever called a
checked lock method.
"""


class ResourceFailure(OSError):
    """Opening, writing, flushing or syncing a destination failed."""

    def __init__(self, key: str, message: str):
        super().__init__(f"[{key}] {message}")
        self.key = key


class TooManyLocks(RuntimeError):
    """A checked lock observed a hold count other than exactly one."""

    def __init__(self, count: int, where: str = "acquire"):
        super().__init__(f"Lock hold count is {count} after {where}, expected 1")
        self.count = count
        self.where = where
