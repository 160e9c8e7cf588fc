"""
Data models exchanged with callers.

:class:`ConversionReport` and :class:`ConversionResult` serialize with the
camelCase field names used in JSON output and in the run log
(``model_dump(by_alias=True)``).
"""

from .conversion import ConversionReport, ConversionResult

__all__ = ["ConversionReport", "ConversionResult"]
