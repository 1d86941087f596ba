from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FaceMatch:
    matched: bool
    confidence: float = 0.0
