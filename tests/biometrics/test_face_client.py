from __future__ import annotations

import pytest
import requests

from src.event_attendance.event_attendance.biometrics.client import FaceVerificationClient
from src.event_attendance.event_attendance.core.exceptions import ServiceUnavailableError


class FakeResponse:
    def __init__(self, payload=None, *, status_code=200, invalid_json=False):
        self.payload = payload
        self.status_code = status_code
        self.invalid_json = invalid_json

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")

    def json(self):
        if self.invalid_json:
            raise ValueError("Expecting value")
        return self.payload


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def post(self, url, json=None, timeout=None):
        self.requests.append((url, json, timeout))
        if self.error is not None:
            raise self.error
        return self.response


def test_verify_posts_sample_and_reference():
    session = FakeSession(FakeResponse({"matched": True, "confidence": 0.93}))
    client = FaceVerificationClient("http://faces.local/api/", timeout=3, session=session)

    match = client.verify("aGVsbG8=", (0.1, 0.2))

    assert match.matched is True
    assert match.confidence == pytest.approx(0.93)
    assert session.requests == [("http://faces.local/api/verify", {"sample": "aGVsbG8=", "reference": [0.1, 0.2]}, 3.0)]


def test_missing_fields_mean_no_match():
    client = FaceVerificationClient("http://faces.local", session=FakeSession(FakeResponse({})))

    match = client.verify("aGVsbG8=", [0.1])

    assert match.matched is False
    assert match.confidence == 0.0


@pytest.mark.parametrize(
    "session",
    [
        FakeSession(error=requests.ConnectionError("connection refused")),
        FakeSession(error=requests.Timeout("timed out")),
        FakeSession(FakeResponse(status_code=502)),
        FakeSession(FakeResponse(invalid_json=True)),
        FakeSession(FakeResponse([0.93, True])),
        FakeSession(FakeResponse("matched")),
    ],
)
def test_service_failures_raise_service_unavailable(session):
    client = FaceVerificationClient("http://faces.local", session=session)

    with pytest.raises(ServiceUnavailableError):
        client.verify("aGVsbG8=", [0.1])
