"""
岗位层级服务模块

负责岗位森林上所有需要维护不变式的查询与修改：
- 上级岗位必须存在（不允许悬空引用）
- 上级关系不能形成环
- 删除有下级的岗位时必须显式选择级联删除或下级重新挂靠

服务本身不持有数据，所有状态都在数据库中；每个方法接收当前请求的会话。
修改操作在进程内锁中完成校验、写入和提交；校验失败或写入出错时，未提交的改动由 get_db 依赖回滚。
"""
import asyncio
from collections import defaultdict, deque
from typing import Dict, List, Optional, Set

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from hierarchy_api.core.exceptions import HasChildrenException, InvalidReferenceException
from hierarchy_api.crud import position_crud
from hierarchy_api.models.position import Position
from hierarchy_api.schemas.position import PositionResponse


def to_response(
    position: Position,
    parent_name: Optional[str] = None,
    child_count: Optional[int] = None
) -> PositionResponse:
    """表模型转响应对象"""
    return PositionResponse(
        id=position.id,
        name=position.name,
        description=position.description,
        parent_id=position.parent_id,
        parent_name=parent_name,
        created_at=position.created_at,
        updated_at=position.updated_at,
        child_count=child_count,
    )


def build_forest(positions: List[Position]) -> List[PositionResponse]:
    """
    由扁平岗位列表组装层级树

    先按 parent_id 分组得到邻接表，再从根岗位逐层展开。
    用 visited 集合防止数据库中已存在的环导致无限递归。
    """
    children_map: Dict[str, List[Position]] = defaultdict(list)
    roots: List[Position] = []
    for position in positions:
        if position.parent_id is None:
            roots.append(position)
        else:
            children_map[position.parent_id].append(position)

    visited: Set[str] = set()

    def build(position: Position) -> PositionResponse:
        visited.add(position.id)
        node = to_response(position)
        node.children = [
            build(child)
            for child in children_map.get(position.id, [])
            if child.id not in visited
        ]
        return node

    forest = [build(root) for root in roots]

    unreachable = len(positions) - len(visited)
    if unreachable:
        logger.warning(
            "层级数据异常: {} 个岗位无法从根岗位到达（循环引用或上级不存在）",
            unreachable,
        )
    return forest


def collect_descendant_ids(links: List[tuple], root_id: str) -> List[str]:
    """
    在 (id, parent_id) 快照上广度优先收集 root_id 的全部后代 ID（不含自身）
    """
    children_map: Dict[str, List[str]] = defaultdict(list)
    for position_id, parent_id in links:
        if parent_id is not None:
            children_map[parent_id].append(position_id)

    descendants: List[str] = []
    seen: Set[str] = {root_id}
    queue = deque([root_id])
    while queue:
        current = queue.popleft()
        for child_id in children_map.get(current, []):
            if child_id in seen:
                continue
            seen.add(child_id)
            descendants.append(child_id)
            queue.append(child_id)
    return descendants


class HierarchyService:
    """岗位层级管理服务"""

    def __init__(self):
        # 串行化结构性修改，避免并发改挂靠时绕过循环检测（仅限单进程）
        self._lock = asyncio.Lock()

    # ========== 查询 ==========

    async def get_by_id(self, db: AsyncSession, position_id: str) -> Optional[PositionResponse]:
        """获取岗位详情（含上级名称）"""
        row = await position_crud.get_with_parent_name(db, position_id)
        if row is None:
            return None
        position, parent_name = row
        return to_response(position, parent_name)

    async def list_all(
        self,
        db: AsyncSession,
        search: Optional[str] = None
    ) -> List[PositionResponse]:
        """
        获取全部岗位（含上级名称和直接下级数量），可按关键词过滤

        关键词匹配名称或描述，比较前两边都做 casefold，非 ASCII 文字同样不区分大小写
        """
        rows = await position_crud.get_all_with_parent_name(db)
        if search:
            term = search.casefold()
            rows = [
                (position, parent_name)
                for position, parent_name in rows
                if term in position.name.casefold() or term in position.description.casefold()
            ]
        child_counts = await position_crud.count_children_by_parent(db)
        return [
            to_response(position, parent_name, child_counts.get(position.id, 0))
            for position, parent_name in rows
        ]

    async def get_hierarchy(self, db: AsyncSession) -> List[PositionResponse]:
        """获取岗位森林，每个根岗位一棵树"""
        positions = await position_crud.get_all(db)
        return build_forest(positions)

    async def get_children(self, db: AsyncSession, parent_id: str) -> List[PositionResponse]:
        """获取直接下级岗位，不解析上级名称"""
        children = await position_crud.get_children(db, parent_id)
        return [to_response(child) for child in children]

    async def available_parents(
        self,
        db: AsyncSession,
        position_id: str
    ) -> Optional[List[PositionResponse]]:
        """
        获取可作为该岗位上级的候选岗位

        排除岗位自身及其全部后代，岗位不存在时返回 None
        """
        if not await position_crud.exists(db, position_id):
            return None
        links = await position_crud.get_parent_links(db)
        excluded = set(collect_descendant_ids(links, position_id))
        excluded.add(position_id)
        rows = await position_crud.get_all_with_parent_name(db)
        return [
            to_response(position, parent_name)
            for position, parent_name in rows
            if position.id not in excluded
        ]

    # ========== 校验 ==========

    async def _ensure_parent_exists(self, db: AsyncSession, parent_id: str) -> None:
        if not await position_crud.exists(db, parent_id):
            raise InvalidReferenceException("上级岗位不存在", parent_id=parent_id)

    async def _would_create_cycle(
        self,
        db: AsyncSession,
        position_id: str,
        new_parent_id: str
    ) -> bool:
        """
        从新上级沿 parent_id 向上遍历，遇到自身即成环

        遍历中如果重复访问某个节点，说明上级链路本身已有环，同样视为非法
        """
        visited: Set[str] = set()
        current_id: Optional[str] = new_parent_id
        while current_id is not None:
            if current_id == position_id or current_id in visited:
                return True
            visited.add(current_id)
            parent = await position_crud.get(db, current_id)
            current_id = parent.parent_id if parent else None
        return False

    # ========== 修改 ==========

    async def create(
        self,
        db: AsyncSession,
        *,
        name: str,
        description: str = "",
        parent_id: Optional[str] = None
    ) -> PositionResponse:
        """创建岗位，上级岗位必须存在"""
        async with self._lock:
            if parent_id is not None:
                await self._ensure_parent_exists(db, parent_id)

            position = await position_crud.create(
                db,
                obj_in={"name": name, "description": description, "parent_id": parent_id},
            )
            await db.commit()

        logger.info("岗位已创建: id={}, name={}, parent_id={}", position.id, name, parent_id)
        return await self.get_by_id(db, position.id)

    async def update(
        self,
        db: AsyncSession,
        position_id: str,
        *,
        name: str,
        description: str = "",
        parent_id: Optional[str] = None
    ) -> Optional[PositionResponse]:
        """
        更新岗位

        parent_id 为 None 时岗位变为根岗位；否则上级必须存在且不能成环
        """
        async with self._lock:
            position = await position_crud.get(db, position_id)
            if position is None:
                return None

            if parent_id is not None:
                await self._ensure_parent_exists(db, parent_id)
                if await self._would_create_cycle(db, position_id, parent_id):
                    logger.warning(
                        "拒绝循环引用: id={}, parent_id={}", position_id, parent_id
                    )
                    raise InvalidReferenceException("不能形成循环引用", parent_id=parent_id)

            position.touch()
            await position_crud.update(
                db,
                db_obj=position,
                obj_in={
                    "name": name,
                    "description": description,
                    "parent_id": parent_id,
                },
            )
            await db.commit()

        logger.info("岗位已更新: id={}, parent_id={}", position_id, parent_id)
        return await self.get_by_id(db, position_id)

    async def delete_simple(self, db: AsyncSession, position_id: str) -> bool:
        """删除岗位，存在下级岗位时拒绝"""
        async with self._lock:
            if not await position_crud.exists(db, position_id):
                return False

            child_count = await position_crud.count_children(db, position_id)
            if child_count:
                raise HasChildrenException(position_id, child_count)

            await position_crud.delete(db, id=position_id)
            await db.commit()

        logger.info("岗位已删除: id={}", position_id)
        return True

    async def delete_cascade(self, db: AsyncSession, position_id: str) -> bool:
        """
        级联删除岗位及其全部后代

        先在内存中算出完整的待删 ID 集合，再一次性批量删除
        """
        async with self._lock:
            if not await position_crud.exists(db, position_id):
                return False

            links = await position_crud.get_parent_links(db)
            ids = collect_descendant_ids(links, position_id)
            ids.append(position_id)

            deleted = await position_crud.delete_many(db, ids)
            await db.commit()

        logger.info("岗位已级联删除: id={}, 共删除 {} 个岗位", position_id, deleted)
        return True

    async def delete_with_reassignment(self, db: AsyncSession, position_id: str) -> bool:
        """
        删除岗位并把直接下级挂到其原上级下

        原上级为空时下级提升为根岗位；孙级岗位不受影响。
        重新挂靠与删除在同一事务中提交
        """
        async with self._lock:
            position = await position_crud.get(db, position_id)
            if position is None:
                return False

            new_parent_id = position.parent_id
            moved = await position_crud.reassign_children(
                db, parent_id=position_id, new_parent_id=new_parent_id
            )
            await position_crud.delete(db, id=position_id)
            await db.commit()

        logger.info(
            "岗位已删除并重新挂靠下级: id={}, 下级 {} 个挂至 {}",
            position_id, moved, new_parent_id,
        )
        return True


# 单例实例
_hierarchy_service = None


def get_hierarchy_service() -> HierarchyService:
    """获取 HierarchyService 单例实例"""
    global _hierarchy_service
    if _hierarchy_service is None:
        _hierarchy_service = HierarchyService()
    return _hierarchy_service
