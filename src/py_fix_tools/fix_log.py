"""
Message logs for FIX sessions.

A BeautyLog writes every incoming and outgoing message through the standard
logging module as a full beautified report. One log is created per session
(plus a GLOBAL one) by a factory sharing a single dictionary.

    factory = create_log_factory("file", load_dictionary("spec/FIX44.xml"))
    log = factory.create_session_log("FIX.4.4:CLIENT->SERVER")
    log.on_incoming(raw)
"""

import logging

from py_fix_tools.fix_beautifier import Beautifier
from py_fix_tools.fix_dictionary import load_dictionary

GLOBAL_SESSION = "GLOBAL"

LOG_MODES = ("file", "no")


class BeautyLog:

    def __init__(self, session_name, beautifier, log=None):
        self.session_name = session_name
        self.beautifier = beautifier
        self.log = log or logging.getLogger(f"{__name__}.{session_name}")

    def on_incoming(self, raw):
        if self.log.isEnabledFor(logging.INFO):
            self.log.info("RECV: %s", self.beautifier.beautify(raw))

    def on_outgoing(self, raw):
        if self.log.isEnabledFor(logging.INFO):
            self.log.info("SENT: %s", self.beautifier.beautify(raw))

    def on_event(self, text):
        self.log.info("%s", text)


class NullLog:

    def on_incoming(self, raw):
        pass

    def on_outgoing(self, raw):
        pass

    def on_event(self, text):
        pass


class BeautyLogFactory:

    def __init__(self, dictionary):
        """
        :param dictionary: a loaded Dictionary, or a path to load one from
        """
        if isinstance(dictionary, (str, bytes)) or hasattr(dictionary, "__fspath__"):
            dictionary = load_dictionary(dictionary)
        self.beautifier = Beautifier(dictionary)

    def create(self):
        return BeautyLog(GLOBAL_SESSION, self.beautifier)

    def create_session_log(self, session_id):
        return BeautyLog(str(session_id), self.beautifier)


class NullLogFactory:

    def create(self):
        return NullLog()

    def create_session_log(self, session_id):
        return NullLog()


def create_log_factory(mode, dictionary):
    """Factory for the given log mode: "file" beautifies, "no" discards."""
    if mode == "file":
        return BeautyLogFactory(dictionary)
    if mode == "no":
        return NullLogFactory()
    raise ValueError(f"unknown log: {mode}")
