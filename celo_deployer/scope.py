"""
Self scope computation

The scope is a Poseidon hash of the app endpoint and a scope label. The hash is
owned by the Self SDK (@selfxyz/core), so it is computed by calling the SDK
through node rather than reimplemented here.
"""

import re
import json
import logging
import subprocess
from typing import Optional

from .exceptions import ScopeError

logger = logging.getLogger('celo_deployer')

SCOPE_OVERRIDE_PREFIX = 'SELF_SCOPE_'

_NODE_SCRIPT = (
    "const { hashEndpointWithScope } = require('@selfxyz/core');"
    "const [endpoint, scope] = JSON.parse(process.argv[1]);"
    "console.log(hashEndpointWithScope(endpoint, scope).toString());"
)


def scope_override_env(scope_label: str) -> str:
    """Environment variable holding a precomputed scope, e.g. SELF_SCOPE_SELF_HOTEL_BOOKING"""
    return SCOPE_OVERRIDE_PREFIX + re.sub(r'[^A-Z0-9]+', '_', scope_label.upper()).strip('_')


def parse_scope(value: str) -> int:
    value = value.strip()
    if value.lower().startswith('0x'):
        return int(value, 16)
    return int(value)


def hash_endpoint_with_scope(endpoint: str, scope_label: str,
                             override: Optional[int] = None,
                             node_binary: str = 'node',
                             cwd: Optional[str] = None) -> int:
    """
    Hash an endpoint URL and a scope label into the numeric Self scope.

    `override` is a precomputed scope for this label, usually taken from
    DeployerConfig.scope_override(scope_label); node is not called then.
    """
    if override is not None:
        logger.info(f"Using precomputed scope for {scope_label}")
        return override

    if len(scope_label) > 31:
        raise ScopeError(f"Scope label must be at most 31 characters: {scope_label!r}")

    try:
        result = subprocess.run(
            [node_binary, '-e', _NODE_SCRIPT, json.dumps([endpoint, scope_label])],
            capture_output=True, text=True, cwd=cwd, check=False
        )
    except FileNotFoundError:
        raise ScopeError(
            f"'{node_binary}' not found; install Node.js or set {scope_override_env(scope_label)}"
        )

    if result.returncode != 0:
        logger.error(f"Self SDK failed: {result.stderr.strip()}")
        raise ScopeError(f"hashEndpointWithScope failed: {result.stderr.strip()}")

    try:
        return parse_scope(result.stdout)
    except ValueError:
        raise ScopeError(f"Unexpected scope output: {result.stdout!r}")
