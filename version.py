"""Project version constants.

Sent as the client user agent and printed by ``cli.py --version``.
"""

ENGINE_NAME: str = "zbx-action"
ENGINE_VERSION: str = "0.1.0"
