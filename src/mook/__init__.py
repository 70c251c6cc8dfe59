"""
mook - Hook any member of any Python object, and unhook it again

``hook(target, name, interceptor)`` puts an interceptor in place of a method,
data attribute or property of an object, handing it the original behaviour as a
fallback. ``unhook(target, name)`` removes the most recent hook and restores
the member exactly as it was. Hooks on the same member stack.
"""

__version__ = "0.1.0"
__license__ = "Apache-2.0"

# Core public API
# Configuration
from .config import MookConfig, get_config, load_config, save_config
from .core.errors import ConflictError, MookError, PlatformRestoreError
from .core.hooker import (
    HookedAttribute,
    HookedCallable,
    HookedProperty,
    depth,
    hook,
    hooked,
    unhook,
    unhook_all,
)
from .core.resolution import MISSING, MemberAnalysis, analyze_member

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Hooking
    "hook",
    "unhook",
    "unhook_all",
    "hooked",
    "depth",
    "MISSING",
    "HookedCallable",
    "HookedAttribute",
    "HookedProperty",
    # Analysis
    "analyze_member",
    "MemberAnalysis",
    # Errors
    "MookError",
    "ConflictError",
    "PlatformRestoreError",
    # Configuration
    "MookConfig",
    "load_config",
    "save_config",
    "get_config",
]
