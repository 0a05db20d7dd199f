class TSPError(Exception):
    """Base class for errors raised by tsp_engine."""


class ProblemEmpty(TSPError, RuntimeError):
    def __init__(self, message: str = "Cannot solve empty problem."):
        super().__init__(message)


class ProblemSourceUnavailable(TSPError, FileNotFoundError):
    pass


class IndexOutOfRange(TSPError, IndexError):
    pass
