from .common import status_badge_meta
from .policy import build_policy_report_view, group_policy_records, partition_groups

__all__ = [
    "build_policy_report_view",
    "group_policy_records",
    "partition_groups",
    "status_badge_meta",
]
