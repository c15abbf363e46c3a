"""
Events component.

Paginated, filtered event listings and lookups.
"""

from sjba_api.components.events.component import (
    DEFAULT_LIST_BOUNDS,
    DEFAULT_UPCOMING_BOUNDS,
    build_filter,
    create_event,
    get_event,
    parse_date_bound,
    run_list,
    run_upcoming,
    total_pages,
    update_event,
)
from sjba_api.components.events.models import (
    EventListInput,
    EventListOutput,
    LimitBounds,
    Pagination,
)
from sjba_api.components.events.ports import EventRepoPort

__all__ = [
    "run_list",
    "run_upcoming",
    "get_event",
    "create_event",
    "update_event",
    "build_filter",
    "parse_date_bound",
    "total_pages",
    "DEFAULT_LIST_BOUNDS",
    "DEFAULT_UPCOMING_BOUNDS",
    "EventListInput",
    "EventListOutput",
    "LimitBounds",
    "Pagination",
    "EventRepoPort",
]
