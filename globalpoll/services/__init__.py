from .admin import authenticate_admin, bootstrap, ensure_default_admin
from .comment import list_comments, submit_comment
from .poll import (
    create_poll,
    delete_poll,
    get_active_poll,
    get_active_poll_view,
    get_poll,
    list_history,
    list_polls,
    poll_view,
    set_active,
    sweep_expired,
    update_poll,
)
from .stats import PollStatistics, compute_stats, compute_stats_bulk, stats_from_counts
from .vote import check_vote_status, submit_vote

__all__ = [
    # admin
    "authenticate_admin",
    "bootstrap",
    "ensure_default_admin",
    # comments
    "list_comments",
    "submit_comment",
    # polls
    "create_poll",
    "delete_poll",
    "get_active_poll",
    "get_poll",
    "list_history",
    "list_polls",
    "poll_view",
    "get_active_poll_view",
    "set_active",
    "sweep_expired",
    "update_poll",
    # stats
    "PollStatistics",
    "compute_stats",
    "compute_stats_bulk",
    "stats_from_counts",
    # votes
    "check_vote_status",
    "submit_vote",
]
