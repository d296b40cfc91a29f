from collections.abc import Awaitable
from typing import TypeVar

from medbook.domain.exceptions import StoreIOError

T = TypeVar("T")


async def store_call(action: str, operation: Awaitable[T]) -> T:
    """Await a record store operation, reporting any failure as ``StoreIOError``."""
    try:
        return await operation
    except StoreIOError:
        raise
    except Exception as exc:
        raise StoreIOError(f"Failed to {action}: {exc}") from exc
