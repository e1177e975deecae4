import itertools


class MutationInProgress(RuntimeError):
    pass


class MutationGuard:
    """Allows one structural mutation (or save) at a time.

    begin() hands out a token; end(token) releases it. External-change
    notifications that arrive while a token is outstanding are treated as
    echoes of our own write.
    """

    def __init__(self):
        self._counter = itertools.count(1)
        self._token = None
        self.label = None

    @property
    def active(self) -> bool:
        return self._token is not None

    def begin(self, label: str = "") -> int:
        if self._token is not None:
            raise MutationInProgress(f"'{self.label}' still in progress")
        self._token = next(self._counter)
        self.label = label
        return self._token

    def end(self, token: int):
        if token != self._token:
            raise ValueError(f"Unknown mutation token {token}")
        self._token = None
        self.label = None

    def hold(self, label: str = ""):
        return _Held(self, label)


class _Held:
    def __init__(self, guard: MutationGuard, label: str):
        self.guard = guard
        self.label = label
        self.token = None

    def __enter__(self):
        self.token = self.guard.begin(self.label)
        return self.token

    def __exit__(self, exc_type, exc, tb):
        self.guard.end(self.token)
        return False
