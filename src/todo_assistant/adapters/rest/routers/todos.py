"""Direct task listing for the sidebar; bypasses the agent."""

from fastapi import APIRouter, Depends

from todo_assistant.adapters.rest.dependencies import get_factory
from todo_assistant.adapters.rest.schemas import ErrorOut, TodoOut
from todo_assistant.factory import ServiceFactory

router = APIRouter(tags=["todos"])


@router.get(
    "/todos",
    response_model=list[TodoOut],
    responses={500: {"model": ErrorOut}},
)
async def list_todos(factory: ServiceFactory = Depends(get_factory)):
    repo = factory.create_task_repository()
    tasks = await repo.list_all()
    return [TodoOut(id=t.id, todo=t.todo) for t in tasks]
