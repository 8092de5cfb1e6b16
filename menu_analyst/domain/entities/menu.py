from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class StructuredMenu:
    """
    Serialized dish list produced by the analysis service.

    The conversation layer only stores it and hands it back on later calls;
    `payload` is the JSON array text exactly as the service serialized it.
    """

    payload: str
