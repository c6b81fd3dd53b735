from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import PlainTextResponse, StreamingResponse

from devtrack.dependencies import get_current_user, get_task_repository
from devtrack.models.user import User as UserModel
from devtrack.repositories import TaskRepository
from devtrack.services.analytics import (
    generate_csv_report,
    generate_status_chart,
    generate_time_spent_chart,
    get_task_dataframe,
    summary_stats,
)

router = APIRouter(prefix="/api/analytics", tags=["analytics"])

async def _user_dataframe(tasks: TaskRepository, user: UserModel):
    return get_task_dataframe(await tasks.list_for_owner(user.id))

@router.get("/summary")
async def get_summary(
    tasks: TaskRepository = Depends(get_task_repository),
    current_user: UserModel = Depends(get_current_user)
):
    df = await _user_dataframe(tasks, current_user)
    return summary_stats(df)

@router.get("/visualizations/time-spent")
async def get_time_spent_chart(
    tasks: TaskRepository = Depends(get_task_repository),
    current_user: UserModel = Depends(get_current_user)
):
    df = await _user_dataframe(tasks, current_user)
    img_buf = await run_in_threadpool(generate_time_spent_chart, df)
    if not img_buf:
        return {"message": "No data"}
    return StreamingResponse(img_buf, media_type="image/png")

@router.get("/visualizations/status")
async def get_status_chart(
    tasks: TaskRepository = Depends(get_task_repository),
    current_user: UserModel = Depends(get_current_user)
):
    df = await _user_dataframe(tasks, current_user)
    img_buf = await run_in_threadpool(generate_status_chart, df)
    if not img_buf:
        return {"message": "No data"}
    return StreamingResponse(img_buf, media_type="image/png")

@router.get("/reports/csv")
async def get_csv_report(
    tasks: TaskRepository = Depends(get_task_repository),
    current_user: UserModel = Depends(get_current_user)
):
    df = await _user_dataframe(tasks, current_user)
    return PlainTextResponse(
        content=generate_csv_report(df),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=devtrack_tasks.csv"}
    )
