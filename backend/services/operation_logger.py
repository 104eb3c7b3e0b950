import uuid
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Optional, TypeVar

from pydantic_core import to_jsonable_python

from models.operation import TaskStatus

T = TypeVar("T")
R = TypeVar("R")

OPERATIONS_TABLE = "ai_operations"
PENDING_TASKS_TABLE = "pending_tasks"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _user_id(user: Any) -> Optional[str]:
    if user is None:
        return None
    if isinstance(user, dict):
        return user.get("id")
    return getattr(user, "id", None)


async def _best_effort(label: str, awaitable: Awaitable[Any]) -> Optional[Any]:
    """Await a logging side effect; any failure is printed and turned into None."""
    try:
        return await awaitable
    except Exception as e:
        print(f"Error {label}: {e}")
        return None


def with_operation_logging(
    tool_slug: str,
    fn: Callable[[T], Awaitable[R]],
    *,
    store,
    get_user: Callable[[], Awaitable[Any]],
    create_pending_task: bool = False,
    session_id: Optional[str] = None,
    input_meta: Optional[Callable[[T], Any]] = None,
) -> Callable[[T], Awaitable[R]]:
    """Wrap an async tool function with operation logging.

    Each call records an ``ai_operations`` row for the current user and, when
    ``create_pending_task`` is set, a ``pending_tasks`` row that moves from
    ``processing`` to ``completed`` or ``failed`` once ``fn`` settles.

    Logging never gates the tool: without a user, an unknown tool slug or a
    failing store the wrapped function still runs, and its result or exception
    reaches the caller unchanged.

    ``store`` must provide ``get_tool_by_slug``, ``insert(table, record)`` and
    ``update(table, id, patch)``; ``get_user`` resolves the current principal
    (or None). ``input_meta`` builds the recorded ``input_meta`` from the params
    when the raw params are too large or sensitive to store.
    """

    async def wrapper(params: T) -> R:
        user = await _best_effort("resolving current user", get_user())
        user_id = _user_id(user)
        if not user_id:
            return await fn(params)

        tool = await _best_effort(f"looking up tool {tool_slug}", store.get_tool_by_slug(tool_slug))
        if not tool:
            print(f"Tool not found: {tool_slug}")
            return await fn(params)

        operation_id = str(uuid.uuid4())

        async def record_operation():
            return await store.insert(OPERATIONS_TABLE, {
                "id": operation_id,
                "user_id": user_id,
                "tool_id": tool["id"],
                "input_meta": to_jsonable_python(input_meta(params) if input_meta else params, fallback=str),
                "session_id": session_id or str(uuid.uuid4()),
                "timestamp": _now(),
            })

        operation = await _best_effort("logging operation", record_operation())
        if not operation:
            print(f"Failed to log operation for {tool_slug}")

        task_id = None
        if create_pending_task and operation:
            now = _now()
            pending_task_id = str(uuid.uuid4())
            task = await _best_effort("creating pending task", store.insert(PENDING_TASKS_TABLE, {
                "id": pending_task_id,
                "operation_id": operation_id,
                "user_id": user_id,
                "status": TaskStatus.processing.value,
                "created_at": now,
                "updated_at": now,
            }))
            if task:
                task_id = pending_task_id

        try:
            result = await fn(params)
        except Exception as e:
            if task_id:
                await _best_effort("updating pending task", store.update(PENDING_TASKS_TABLE, task_id, {
                    "status": TaskStatus.failed.value,
                    "error": str(e),
                    "updated_at": _now(),
                }))
            raise

        async def complete_task():
            return await store.update(PENDING_TASKS_TABLE, task_id, {
                "status": TaskStatus.completed.value,
                "result": to_jsonable_python(result, fallback=str),
                "updated_at": _now(),
            })

        if task_id:
            await _best_effort("updating pending task", complete_task())
        return result

    return wrapper
