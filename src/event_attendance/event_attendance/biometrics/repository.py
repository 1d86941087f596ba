from __future__ import annotations

from typing import Optional, Protocol, Sequence


class BiometricRepository(Protocol):
    def get_reference_encoding(self, student_id: int) -> Optional[Sequence[float]]:
        raise NotImplementedError
