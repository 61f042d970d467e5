class SimulationError(RuntimeError):
    """The simulator reached a state it cannot continue from."""


class InvalidAccessError(SimulationError):
    def __init__(self, page_num, num_pages):
        super().__init__(f"Invalid access: page {page_num} outside [0, {num_pages})")
        self.page_num = page_num
        self.num_pages = num_pages


class TraceFormatError(ValueError):
    def __init__(self, message, line_num=None):
        if line_num is not None:
            message = f"line {line_num}: {message}"
        super().__init__(message)
        self.line_num = line_num
