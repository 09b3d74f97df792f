"""
Docstring for SessionRendezvous

Lets a caller block until the session layer reports the outcome of a logon
cycle: logged on (35=A received) or logged out (35=5 received).

Functions:
- from_admin(msg)
- signal_logon() / signal_logout()
- wait(timeout)
- reset()

The first signal of a cycle wakes every waiter; waiters arriving later see
the same outcome without blocking.
"""

import logging
import threading

from py_fix_tools.fix_errors import SessionTimeout
from py_fix_tools.fix_message import FixMessage
from py_fix_tools.fix_parser import extract_tag
from py_fix_tools.fix_tags import FixMsgType, FixTag

logger = logging.getLogger(__name__)


class SessionRendezvous:

    def __init__(self, session_name="GLOBAL"):
        self.session_name = session_name
        self._cond = threading.Condition()
        # None until signalled, then True (logged on) or False (logged out)
        self._connected = None

    @property
    def state(self):
        with self._cond:
            return self._connected

    def _signal(self, connected):
        with self._cond:
            self._connected = connected
            self._cond.notify_all()
        logger.info("Session %s %s", self.session_name, "logged on" if connected else "logged out")

    def signal_logon(self):
        self._signal(True)

    def signal_logout(self):
        self._signal(False)

    def from_admin(self, message):
        """Feed an incoming admin message (FixMessage or raw string)."""
        if isinstance(message, FixMessage):
            msg_type = message.msg_type
        else:
            msg_type = extract_tag(message, FixTag.MSG_TYPE)

        if msg_type == FixMsgType.LOGON:
            self.signal_logon()
        elif msg_type == FixMsgType.LOGOUT:
            self.signal_logout()

    def wait(self, timeout=None) -> bool:
        """Block until logged on (True) or logged out (False).

        Raises SessionTimeout if timeout seconds pass without a signal.
        """
        with self._cond:
            if not self._cond.wait_for(lambda: self._connected is not None, timeout):
                raise SessionTimeout(f"Session {self.session_name}: no logon within {timeout}s")
            return self._connected

    def reset(self):
        """Start a new logon cycle."""
        with self._cond:
            self._connected = None
