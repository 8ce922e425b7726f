class FakeClock:
    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class FakeSleep:
    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)


class FakeLLMClient:
    provider = "fake"

    def __init__(self, responses=None, error=None):
        self.responses = list(responses or [])
        self.error = error
        self.calls = []

    def invoke(self, model_id, prompt, schema=None, system=None):
        self.calls.append({"model_id": model_id, "prompt": prompt, "schema": schema, "system": system})
        if self.error is not None:
            raise self.error
        if self.responses:
            return self.responses.pop(0)
        return ""


class FakeResponse:
    def __init__(self, status_code=200, payload=None, body_error=False):
        self.status_code = status_code
        self._payload = payload
        self._body_error = body_error

    def json(self):
        if self._body_error:
            raise ValueError("no json")
        return self._payload


class FakeSession:
    """Stands in for ``requests.Session``; every post returns the same response."""

    def __init__(self, status_code=200, payload=None, error=None):
        self.response = FakeResponse(status_code, payload)
        self.error = error
        self.requests = []

    def post(self, url, **kwargs):
        self.requests.append((url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response
