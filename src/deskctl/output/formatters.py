"""Human/JSON output selection.

The CLI renders ServiceResult for humans (Rich tables and status lines)
or machines (--json). This layer picks the mode.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from deskctl.output.renderers import render_quiet, render_result

if TYPE_CHECKING:
    from deskctl.services.result import ServiceResult


def format_result(
    result: ServiceResult,
    *,
    json_output: bool = False,
    quiet: bool = False,
    verbose: bool = False,
) -> str:
    """Format a ServiceResult for display.

    ``json_output`` wins over ``quiet``; the JSON payload always carries
    the full result including warnings and meta.
    """
    if json_output:
        return result.model_dump_json(indent=2)
    if quiet:
        return render_quiet(result)
    return render_result(result, verbose=verbose)
