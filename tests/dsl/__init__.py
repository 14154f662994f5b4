from .fake_document import FakeDocument

__all__ = [
    "FakeDocument",
]
