import logging

logger = logging.getLogger("tsvgrid.registry")


class EditorRegistry:
    """Open sessions, so a settings change can refresh every one of them."""

    def __init__(self):
        self._sessions = []

    def __len__(self):
        return len(self._sessions)

    def __iter__(self):
        return iter(list(self._sessions))

    def register(self, session):
        if session not in self._sessions:
            self._sessions.append(session)

    def unregister(self, session):
        if session in self._sessions:
            self._sessions.remove(session)

    def broadcast(self, event: str):
        """Call ``event`` (e.g. "refresh") on every registered session."""
        logger.debug("Broadcasting %s to %d session(s)", event, len(self._sessions))
        for session in list(self._sessions):
            handler = getattr(session, event, None)
            if callable(handler):
                handler()
