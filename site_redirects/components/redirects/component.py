"""
Redirects component - request resolution entry points.

Handles the per-request decision: gone, exact, pattern or fallback.

Invariants:
- I1: Gone takes precedence over every redirect rule
- I2: Exact rules take precedence over pattern rules
- I3: The first matching pattern rule wins
- I4: Every non-gone outcome uses the configured permanent code
- I5: Query string and fragment of the request are preserved
"""

from __future__ import annotations

from ._impl import RedirectResolver
from .models import ResolveOutput, ResolveRedirectInput


def run_resolve(
    inp: ResolveRedirectInput,
    *,
    resolver: RedirectResolver,
) -> ResolveOutput:
    """
    Resolve a request URL.

    Args:
        inp: Input containing the absolute request URL and the request.
        resolver: Configured redirect resolver.

    Returns:
        ResolveOutput with the decision and the stage that produced it.
    """
    result, stage, normalized = resolver.resolve_with_stage(inp.url, inp.request)

    return ResolveOutput(
        result=result,
        stage=stage,
        normalized_path=normalized,
        errors=[],
        success=True,
    )


def run(
    inp: ResolveRedirectInput,
    *,
    resolver: RedirectResolver,
) -> ResolveOutput:
    """
    Main entry point for the redirects component.

    Dispatches to appropriate handler based on input type.
    """
    if isinstance(inp, ResolveRedirectInput):
        return run_resolve(inp, resolver=resolver)
    raise ValueError(f"Unknown input type: {type(inp)}")
