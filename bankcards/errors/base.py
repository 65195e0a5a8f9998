from typing import Any


class ApplicationError(Exception):
    """General application error"""

    http_code: int | None = None
    error_code: int
    error: str
    # optional pointer to the offending field or resource
    where: str | None = None

    def __init__(self, details: Any | None = None, where: str | None = None):
        self.error = self.error
        if details:
            self.error += f": {details}"
        if where is not None:
            self.where = where
        super().__init__(self.error)
