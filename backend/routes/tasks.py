from fastapi import APIRouter, HTTPException, status, Depends
from database import Database, get_database
from models.operation import Operation, PendingTask
from models.user import UserResponse
from services.auth import get_current_user

router = APIRouter(prefix="/api", tags=["operations"])

@router.get("/operations", response_model=list[Operation])
async def get_operation_history(
    limit: int = 20,
    current_user: UserResponse = Depends(get_current_user),
    db: Database = Depends(get_database),
):
    operations = await db.get_user_operations(current_user.id, limit)
    return [Operation(**operation) for operation in operations]

@router.get("/pending-tasks", response_model=list[PendingTask])
async def get_pending_tasks(
    current_user: UserResponse = Depends(get_current_user),
    db: Database = Depends(get_database),
):
    tasks = await db.get_user_pending_tasks(current_user.id)
    return [PendingTask(**task) for task in tasks]

@router.get("/pending-tasks/{task_id}", response_model=PendingTask)
async def get_pending_task(
    task_id: str,
    current_user: UserResponse = Depends(get_current_user),
    db: Database = Depends(get_database),
):
    task = await db.get_pending_task(task_id)
    if not task or task.get("user_id") != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Task not found"
        )
    return PendingTask(**task)
