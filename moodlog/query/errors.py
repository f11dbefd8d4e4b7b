"""
Query engine errors.
"""


class StoreError(Exception):
    """
    A store read or write failed.

    Raised by query engines in place of driver exceptions. The operation
    name is kept for logs; it is never shown to API callers.
    """

    def __init__(self, operation: str, message: str = "Store operation failed"):
        self.operation = operation
        super().__init__(f"{message}: {operation}")
