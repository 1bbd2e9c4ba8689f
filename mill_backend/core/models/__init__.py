from .document_sequence import DocumentSequence
from .mill_settings import MillSettings

__all__ = ["DocumentSequence", "MillSettings"]
