"""
Inclusion/Exclusion Applier.

Runs when a scope is created fresh. Scopes produced by duplication inherit
their parent's membership and are never filtered.
"""

import logging
from typing import Any, List, Optional

from scopebufs.scope.accessor import ScopeAccessor, dedupe
from scopebufs.scope.schemas import ScopeId

logger = logging.getLogger(__name__)


def apply_include_exclude(accessor: ScopeAccessor, scope: Optional[ScopeId] = None) -> Optional[List[Any]]:
    """
    Filter a new scope's membership through the include and exclude filters.

    Items matching exclude are dropped from the scope's own list; every live
    global item matching include is then added, so include wins over exclude.
    The scope's current item is always put first.

    Args:
        accessor: Accessor bound to the host and filters
        scope: The new scope, None for the current one

    Returns:
        The new active list, or None when there is no scope
    """
    host = accessor.host
    filters = accessor.filters
    scope = accessor.resolve(scope)
    if scope is None:
        return None

    current = accessor.compute_list(scope, include_hidden=True)
    kept = [i for i in current if not filters.exclude.match(host.item_name(i))]
    included = [i for i in host.all_items() if filters.include.match(host.item_name(i))]

    focused = host.current_item(scope)
    head = [focused] if focused is not None else []
    result = dedupe(head + kept + included)

    accessor.set_active(scope, result)
    accessor.set_buried(scope, [])
    logger.debug(
        "Applied include/exclude to %s: %d kept, %d included",
        scope, len(kept), len(included),
    )
    return result
