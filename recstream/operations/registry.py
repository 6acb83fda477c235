from __future__ import annotations

from functools import lru_cache

from chainkit.stage_registry import StageRegistry
from chainkit.stage_types import StageRef


@lru_cache(maxsize=1)
def get_stage_registry() -> StageRegistry:
    # Single import point for the built-in catalog; each module exports `STAGE`.
    from recstream.operations import (  # noqa: PLC0415
        fromcsv,
        grep,
        head,
        sort,
        tojson,
        topn,
        totable,
        xform,
    )

    refs: list[StageRef] = [
        module.STAGE for module in (fromcsv, grep, head, sort, tojson, topn, totable, xform)
    ]
    return StageRegistry.from_refs(refs)
