"""
Categorization errors

The classification path never lets these escape to callers (it fails open to
default categories); category store mutations raise them for the API to map
onto HTTP status codes.
"""


class CategorizationError(Exception):
    """Base class for categorization errors"""


class MalformedModelResponse(CategorizationError):
    """Model output was not JSON, or did not match the expected shape"""

    def __init__(self, message: str, raw_response: str = ""):
        super().__init__(message)
        self.raw_response = raw_response


class CategoryValidationError(CategorizationError):
    """Category assignment breaks the 1-4 unique existing categories rule"""


class CategoryNotFoundError(CategorizationError):
    """No category with the given id"""


class CategoryConflictError(CategorizationError):
    """Another category already uses this slug"""


class CategoryInUseError(CategorizationError):
    """Category is still the primary category of existing posts"""

    def __init__(self, category_id: str, post_count: int):
        super().__init__(
            f"Cannot delete category with {post_count} posts. "
            "Move posts to another category first."
        )
        self.category_id = category_id
        self.post_count = post_count
