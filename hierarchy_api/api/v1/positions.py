"""
岗位层级管理 API 路由
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Response, status
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hierarchy_api.core.database import get_db
from hierarchy_api.core.response import success_response, ResponseModel
from hierarchy_api.core.exceptions import NotFoundException, BadRequestException
from hierarchy_api.schemas.position import (
    PositionCreate,
    PositionUpdate,
    PositionResponse,
)
from hierarchy_api.services.hierarchy import HierarchyService, get_hierarchy_service

router = APIRouter()


@router.get("", summary="获取岗位列表", response_model=ResponseModel[List[PositionResponse]])
async def get_positions(
    search: Optional[str] = Query(None, description="按名称或描述搜索（不区分大小写）"),
    db: AsyncSession = Depends(get_db),
    service: HierarchyService = Depends(get_hierarchy_service),
):
    """
    获取全部岗位（含上级岗位名称）
    """
    positions = await service.list_all(db, search=search)
    return success_response(data=positions)


@router.get("/hierarchy", summary="获取岗位层级树", response_model=ResponseModel[List[PositionResponse]])
async def get_hierarchy(
    db: AsyncSession = Depends(get_db),
    service: HierarchyService = Depends(get_hierarchy_service),
):
    """
    获取岗位森林，每个根岗位一棵树
    """
    forest = await service.get_hierarchy(db)
    return success_response(data=forest)


@router.post(
    "",
    summary="创建岗位",
    status_code=status.HTTP_201_CREATED,
    response_model=ResponseModel[PositionResponse],
)
async def create_position(
    data: PositionCreate,
    db: AsyncSession = Depends(get_db),
    service: HierarchyService = Depends(get_hierarchy_service),
):
    """
    创建新岗位，指定的上级岗位必须存在
    """
    position = await service.create(
        db,
        name=data.name,
        description=data.description,
        parent_id=data.parent_id,
    )
    return success_response(
        data=position,
        message="岗位创建成功",
        code=status.HTTP_201_CREATED,
    )


@router.get("/{position_id}", summary="获取岗位详情", response_model=ResponseModel[PositionResponse])
async def get_position(
    position_id: str,
    db: AsyncSession = Depends(get_db),
    service: HierarchyService = Depends(get_hierarchy_service),
):
    """
    根据 ID 获取岗位详情
    """
    position = await service.get_by_id(db, position_id)
    if not position:
        raise NotFoundException(f"岗位不存在: {position_id}")
    return success_response(data=position)


@router.get(
    "/{position_id}/children",
    summary="获取直接下级岗位",
    response_model=ResponseModel[List[PositionResponse]],
)
async def get_children(
    position_id: str,
    db: AsyncSession = Depends(get_db),
    service: HierarchyService = Depends(get_hierarchy_service),
):
    children = await service.get_children(db, position_id)
    return success_response(data=children)


@router.get(
    "/{position_id}/available-parents",
    summary="获取可选上级岗位",
    response_model=ResponseModel[List[PositionResponse]],
)
async def get_available_parents(
    position_id: str,
    db: AsyncSession = Depends(get_db),
    service: HierarchyService = Depends(get_hierarchy_service),
):
    """
    编辑岗位时可选的上级岗位：排除岗位自身及其全部后代
    """
    candidates = await service.available_parents(db, position_id)
    if candidates is None:
        raise NotFoundException(f"岗位不存在: {position_id}")
    return success_response(data=candidates)


@router.put("/{position_id}", summary="更新岗位", response_model=ResponseModel[PositionResponse])
async def update_position(
    position_id: str,
    data: PositionUpdate,
    db: AsyncSession = Depends(get_db),
    service: HierarchyService = Depends(get_hierarchy_service),
):
    """
    整体更新岗位信息，parentId 为空时岗位变为根岗位
    """
    position = await service.update(
        db,
        position_id,
        name=data.name,
        description=data.description,
        parent_id=data.parent_id,
    )
    if not position:
        raise NotFoundException(f"岗位不存在: {position_id}")
    return success_response(data=position, message="岗位更新成功")


@router.delete(
    "/{position_id}",
    summary="删除岗位",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def delete_position(
    position_id: str,
    db: AsyncSession = Depends(get_db),
    service: HierarchyService = Depends(get_hierarchy_service),
):
    """
    删除岗位，存在下级岗位时返回 400
    """
    deleted = await service.delete_simple(db, position_id)
    if not deleted:
        raise NotFoundException(f"岗位不存在: {position_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{position_id}/cascade",
    summary="级联删除岗位",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def delete_position_cascade(
    position_id: str,
    db: AsyncSession = Depends(get_db),
    service: HierarchyService = Depends(get_hierarchy_service),
):
    """
    删除岗位及其全部下级岗位
    """
    try:
        deleted = await service.delete_cascade(db, position_id)
    except SQLAlchemyError as e:
        logger.exception("级联删除失败: id={}", position_id)
        raise BadRequestException(f"级联删除失败: {e}") from e
    if not deleted:
        raise NotFoundException(f"岗位不存在: {position_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{position_id}/reassign",
    summary="删除岗位并重新挂靠下级",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def delete_position_with_reassignment(
    position_id: str,
    db: AsyncSession = Depends(get_db),
    service: HierarchyService = Depends(get_hierarchy_service),
):
    """
    删除岗位，其直接下级改挂到该岗位原来的上级下
    """
    try:
        deleted = await service.delete_with_reassignment(db, position_id)
    except SQLAlchemyError as e:
        logger.exception("删除并重新挂靠失败: id={}", position_id)
        raise BadRequestException(f"删除并重新挂靠失败: {e}") from e
    if not deleted:
        raise NotFoundException(f"岗位不存在: {position_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
