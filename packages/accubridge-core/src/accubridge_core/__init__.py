"""accubridge core - AccuRev streams and directories, AccuWork issues, via the accurev CLI."""

from accubridge_core.client import AccuRevClient
from accubridge_core.config import AccuBridgeConfig, load_config
from accubridge_core.errors import AccuBridgeError
from accubridge_core.issues import AccuWorkProvider, create_issue_tracking_provider
from accubridge_core.reply import ReplyDocument, parse_reply
from accubridge_core.runner import ProcessRunner
from accubridge_core.vcs import AccuRevProvider, create_source_control_provider

__version__ = "0.1.0"

__all__ = [
    "AccuBridgeConfig",
    "AccuBridgeError",
    "AccuRevClient",
    "AccuRevProvider",
    "AccuWorkProvider",
    "ProcessRunner",
    "ReplyDocument",
    "create_issue_tracking_provider",
    "create_source_control_provider",
    "load_config",
    "parse_reply",
]
