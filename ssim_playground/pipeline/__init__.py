from .cancellation import Deadline
from .compare_images import compare_images

__all__ = ["Deadline", "compare_images"]
