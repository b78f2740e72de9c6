"""
岗位 CRUD 操作
"""
from typing import Dict, Optional, List, Tuple
from sqlalchemy import select, update, delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from hierarchy_api.models.position import Position
from hierarchy_api.models.base import utc_now
from .base import CRUDBase


class CRUDPosition(CRUDBase[Position]):
    """岗位 CRUD 操作类"""

    def _with_parent_name(self):
        """岗位自连接上级岗位，附带上级名称"""
        parent = aliased(self.model)
        return (
            select(self.model, parent.name)
            .outerjoin(parent, self.model.parent_id == parent.id)
        )

    async def get_with_parent_name(
        self,
        db: AsyncSession,
        id: str
    ) -> Optional[Tuple[Position, Optional[str]]]:
        """获取岗位及其上级岗位名称"""
        result = await db.execute(
            self._with_parent_name().where(self.model.id == id)
        )
        row = result.one_or_none()
        if row is None:
            return None
        return row[0], row[1]

    async def get_all_with_parent_name(
        self,
        db: AsyncSession
    ) -> List[Tuple[Position, Optional[str]]]:
        """获取全部岗位及上级名称"""
        result = await db.execute(self._with_parent_name())
        return [(position, parent_name) for position, parent_name in result.all()]

    async def get_children(self, db: AsyncSession, parent_id: str) -> List[Position]:
        """获取直接下级岗位（仅一层）"""
        result = await db.execute(
            select(self.model).where(self.model.parent_id == parent_id)
        )
        return list(result.scalars().all())

    async def count_children(self, db: AsyncSession, parent_id: str) -> int:
        """统计直接下级岗位数量"""
        result = await db.execute(
            select(func.count())
            .select_from(self.model)
            .where(self.model.parent_id == parent_id)
        )
        return result.scalar() or 0

    async def count_children_by_parent(self, db: AsyncSession) -> Dict[str, int]:
        """按上级分组统计直接下级数量，没有下级的岗位不出现在结果中"""
        result = await db.execute(
            select(self.model.parent_id, func.count())
            .where(self.model.parent_id.is_not(None))
            .group_by(self.model.parent_id)
        )
        return {parent_id: count for parent_id, count in result.all()}

    async def get_parent_links(self, db: AsyncSession) -> List[Tuple[str, Optional[str]]]:
        """一次性读取全部 (id, parent_id)，用于在内存中计算子树"""
        result = await db.execute(
            select(self.model.id, self.model.parent_id)
        )
        return [(row.id, row.parent_id) for row in result.all()]

    async def delete_many(self, db: AsyncSession, ids: List[str]) -> int:
        """按 ID 集合批量删除，单条 DELETE 语句"""
        if not ids:
            return 0
        result = await db.execute(
            delete(self.model).where(self.model.id.in_(ids))
        )
        await db.flush()
        return result.rowcount

    async def reassign_children(
        self,
        db: AsyncSession,
        *,
        parent_id: str,
        new_parent_id: Optional[str]
    ) -> int:
        """把 parent_id 的直接下级批量挂到 new_parent_id 下（可为 None，即提升为根岗位）"""
        result = await db.execute(
            update(self.model)
            .where(self.model.parent_id == parent_id)
            .values(parent_id=new_parent_id, updated_at=utc_now())
        )
        await db.flush()
        return result.rowcount


position_crud = CRUDPosition(Position)
