"""Thin accurev client shared by the source control and issue providers."""

from __future__ import annotations

import logging
from pathlib import Path

from accubridge_core.errors import AuthenticationFailed, ExternalToolError
from accubridge_core.reply import ReplyDocument, parse_reply
from accubridge_core.runner import ProcessRunner

logger = logging.getLogger(__name__)


class AccuRevClient:
    """Runs accurev commands and parses their XML replies."""

    def __init__(self, runner: ProcessRunner, username: str = "", password: str = "") -> None:
        self.runner = runner
        self.username = username
        self._password = password

    def is_available(self) -> bool:
        return self.runner.is_available()

    def call(self, command: str, *args: str, cwd: str | Path | None = None) -> ReplyDocument:
        """Run ``accurev <command> <args...>`` and parse the output."""
        output = self.runner.run(command, *args, cwd=cwd)
        return parse_reply(output)

    def login(self) -> None:
        """``accurev login``; safe to repeat before every operation."""
        try:
            self.runner.run("login", self.username, self._password)
        except ExternalToolError as e:
            raise AuthenticationFailed(self.username, e) from e
        logger.debug("Logged in to AccuRev as %s", self.username or "(default user)")
