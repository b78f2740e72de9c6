"""
服务层模块
"""
from .hierarchy import (
    HierarchyService,
    get_hierarchy_service,
    build_forest,
    collect_descendant_ids,
)

__all__ = [
    "HierarchyService",
    "get_hierarchy_service",
    "build_forest",
    "collect_descendant_ids",
]
