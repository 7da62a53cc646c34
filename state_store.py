"""In-memory calculator state, one AppState per browser session.

The Flask session only carries an opaque id; the state itself stays in this
process so the log can hold long advanced-mode answers without hitting the
cookie size limit. Nothing is written to disk.
"""

from collections import OrderedDict
import threading
import uuid

from flask import session

import config
from calculator_state import AppState, reduce

SESSION_KEY = "calc_session_id"


class StateStore:
    def __init__(self, max_sessions=None):
        self.max_sessions = max_sessions or config.MAX_SESSIONS
        self._states = OrderedDict()
        self._lock = threading.Lock()

    def get(self, session_id: str) -> AppState:
        with self._lock:
            state = self._states.get(session_id)
            if state is None:
                state = AppState.default()
                self._put(session_id, state)
            else:
                self._states.move_to_end(session_id)
            return state

    def update(self, session_id: str, fn) -> AppState:
        """Replace the session's state with fn(state) atomically and return it."""
        with self._lock:
            state = self._states.get(session_id) or AppState.default()
            new_state = fn(state)
            self._put(session_id, new_state)
            return new_state

    def dispatch(self, session_id: str, action) -> AppState:
        return self.update(session_id, lambda state: reduce(state, action))

    def __len__(self):
        return len(self._states)

    def _put(self, session_id, state):
        self._states[session_id] = state
        self._states.move_to_end(session_id)
        # Evict the least recently used sessions
        while len(self._states) > self.max_sessions:
            self._states.popitem(last=False)


store = StateStore()


def current_session_id() -> str:
    session.permanent = True  # Ensure persistence
    session_id = session.get(SESSION_KEY)
    if not session_id:
        session_id = uuid.uuid4().hex
        session[SESSION_KEY] = session_id
    return session_id
