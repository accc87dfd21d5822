from .status_merge import MergeReport, StationStore, merge_statuses

__all__ = ["MergeReport", "StationStore", "merge_statuses"]
