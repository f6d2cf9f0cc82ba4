# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Node attribute URL helpers."""

from __future__ import annotations

_NODE_URL_SEPARATOR = ":"


def node_url_join(node_id: str, url: str) -> str:
    """Join a node ID and an attribute path into a node URL.

    Example:
        >>> node_url_join("n1", "/PhysState")
        'n1:/PhysState'
    """
    return f"{node_id}{_NODE_URL_SEPARATOR}{url}"


def node_url_split(node_url: str) -> tuple[str, str]:
    """Split a node URL into ``(node_id, url)``.

    The node ID never contains the separator, so the first occurrence splits.
    A URL without separator is treated as a bare attribute path.
    """
    node_id, sep, url = node_url.partition(_NODE_URL_SEPARATOR)
    if not sep:
        return "", node_url
    return node_id, url


def url_push(base: str, element: str) -> str:
    """Append a path element to an attribute path.

    Example:
        >>> url_push("/Services", "powermancontrol")
        '/Services/powermancontrol'
    """
    return f"{base.rstrip('/')}/{element.strip('/')}"


__all__: list[str] = ["node_url_join", "node_url_split", "url_push"]
