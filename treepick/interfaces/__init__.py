from .api import TreePicker

__all__ = [
    "TreePicker",
]
