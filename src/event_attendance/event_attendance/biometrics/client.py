from __future__ import annotations

import logging
from typing import Protocol, Sequence

import requests

from ..core.exceptions import ServiceUnavailableError
from .model import FaceMatch

logger = logging.getLogger(__name__)


class FaceVerifier(Protocol):
    def verify(self, sample_base64: str, reference_encoding: Sequence[float]) -> FaceMatch:
        raise NotImplementedError


class FaceVerificationClient(FaceVerifier):
    """HTTP client for the external face-verification service.

    The comparison happens remotely; this only ships the sample and the stored
    reference encoding and reads back {matched, confidence}.
    """

    def __init__(self, base_url: str, *, timeout: float = 10.0, session: requests.Session | None = None):
        self._base_url = base_url.rstrip("/")
        self._timeout = float(timeout)
        self._session = session or requests.Session()

    def verify(self, sample_base64: str, reference_encoding: Sequence[float]) -> FaceMatch:
        url = f"{self._base_url}/verify"
        try:
            response = self._session.post(
                url,
                json={"sample": sample_base64, "reference": list(reference_encoding)},
                timeout=self._timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as exc:
            logger.error("Face verification request to %s failed: %s", url, exc)
            raise ServiceUnavailableError(f"Facial verification service unavailable: {exc}") from exc
        except ValueError as exc:
            logger.error("Face verification service returned invalid JSON: %s", exc)
            raise ServiceUnavailableError("Facial verification service returned an invalid response") from exc

        if not isinstance(payload, dict):
            logger.error("Face verification service returned %s instead of an object", type(payload).__name__)
            raise ServiceUnavailableError("Facial verification service returned an invalid response")

        match = FaceMatch(matched=bool(payload.get("matched", False)), confidence=float(payload.get("confidence") or 0.0))
        logger.info("Face verification result: matched=%s confidence=%.3f", match.matched, match.confidence)
        return match
