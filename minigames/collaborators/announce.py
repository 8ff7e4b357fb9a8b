"""Announcement sink that records what was announced and echoed."""

from __future__ import annotations
import logging

from ..messages import Message

logger = logging.getLogger(__name__)


class Announce:
    """
    Records server-wide announcements and echoes to other surfaces
    (e.g. an IRC relay). Both are also written to the log.
    """

    def __init__(self):
        self.messages: list[str] = []
        self.echoes: list[tuple] = []

    def announce(self, template: str, *args):
        message = Message.format(template, *args)
        self.messages.append(message)
        logger.info("Announce: %s", message)

    def echo(self, tag: str, *payload):
        self.echoes.append((tag, *payload))
        logger.debug("Echo %s: %s", tag, payload)
