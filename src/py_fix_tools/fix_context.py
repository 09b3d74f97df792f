"""
Process level state shared by the FIX tools.

FixContext loads the protocol dictionary once and owns the token generator,
the log factory and the logon rendezvous, so nothing lives in module
globals. The dictionary path comes from the FIX_XML_PATH environment
variable unless given explicitly.
"""

import logging
import os

from py_fix_tools.fix_beautifier import Beautifier
from py_fix_tools.fix_dictionary import load_dictionary
from py_fix_tools.fix_log import create_log_factory
from py_fix_tools.session_manager import SessionRendezvous
from py_fix_tools.token_generator import TokenGenerator

logger = logging.getLogger(__name__)

DEFAULT_FIX_XML_PATH = "spec/FIX44.xml"


def default_dictionary_path():
    return os.environ.get("FIX_XML_PATH", DEFAULT_FIX_XML_PATH)


class FixContext:

    def __init__(self, dictionary_path=None, log_mode="file", token_seed=None):
        self.dictionary_path = dictionary_path or default_dictionary_path()

        # Fatal: nothing can be rendered without a dictionary
        self.dictionary = load_dictionary(self.dictionary_path)

        self.beautifier = Beautifier(self.dictionary)
        self.log_factory = create_log_factory(log_mode, self.dictionary)
        self.tokens = TokenGenerator(seed=token_seed)
        self.rendezvous = SessionRendezvous()
        logger.debug("FIX context ready (dictionary=%s, log=%s)", self.dictionary_path, log_mode)

    def beautify(self, raw) -> str:
        return self.beautifier.beautify(raw)

    def next_cl_ord_id(self) -> str:
        """A fresh ClOrdID (tag 11) for an outgoing order."""
        return self.tokens.next_str()
