"""
Core package for mook.

This package contains the resolution analyzer, the per-target registry and the
hook installer/restorer that together form the interception engine.
"""

from .errors import ConflictError, MookError, PlatformRestoreError
from .hooker import HookedAttribute, HookedCallable, HookedProperty, depth, hook, hooked, unhook, unhook_all
from .resolution import MISSING, MemberAnalysis, analyze_member

__version__ = "0.1.0"
