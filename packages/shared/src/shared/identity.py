"""Worker identity strings.

An identity has the shape ``<hostname>:<pid>[:<tags...>]``. It is stable for
the lifetime of the process and is what lease keys are derived from.
Accessors do not validate. A member without a pid segment yields an empty
pid, so its lease key never exists and it reads dead.
"""

from __future__ import annotations

import os
import socket
from collections.abc import Iterable

from shared.keys.workers import heartbeat_key

IDENTITY_SEPARATOR = ":"


def build_identity(
    hostname: str,
    pid: int | str,
    tags: Iterable[str] = (),
) -> str:
    """Join hostname, pid and optional tags into an identity."""
    tag_part = ",".join(tags)
    parts = [hostname, str(pid)]
    if tag_part:
        parts.append(tag_part)
    return IDENTITY_SEPARATOR.join(parts)


def current_identity(tags: Iterable[str] = ()) -> str:
    """Identity of the running process."""
    return build_identity(socket.gethostname(), os.getpid(), tags)


def hostname(identity: str) -> str:
    return identity.split(IDENTITY_SEPARATOR)[0]


def pid(identity: str) -> str:
    parts = identity.split(IDENTITY_SEPARATOR)
    return parts[1] if len(parts) > 1 else ""


def lease_key(identity: str) -> str:
    """Lease key owned by the worker with this identity."""
    return heartbeat_key(hostname(identity), pid(identity))
