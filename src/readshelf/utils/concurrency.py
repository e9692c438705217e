"""有界并发工作池."""

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

T = TypeVar("T")
R = TypeVar("R")


async def run_bounded(
    items: Sequence[T],
    limit: int,
    handler: Callable[[int, T], Awaitable[R]],
) -> list[R]:
    """
    用固定数量的 worker 处理 items.

    启动 min(limit, len(items)) 个 worker，从共享队列中依次领取任务，
    不预先分片；任一时刻最多 limit 个 handler 在执行。
    某个 handler 抛出异常不会取消其他任务，全部结束后再抛出第一个异常。

    Args:
        items: 待处理的元素
        limit: 并发上限，小于 1 时按 1 处理
        handler: 处理函数，参数为 (原始下标, 元素)

    Returns:
        按输入顺序排列的结果（与完成顺序无关）
    """
    if not items:
        return []

    queue: asyncio.Queue[int] = asyncio.Queue()
    for index in range(len(items)):
        queue.put_nowait(index)

    results: list[R | None] = [None] * len(items)
    errors: list[Exception] = []

    async def worker() -> None:
        while True:
            try:
                index = queue.get_nowait()
            except asyncio.QueueEmpty:
                return
            try:
                results[index] = await handler(index, items[index])
            except Exception as e:
                errors.append(e)

    worker_count = min(max(1, limit), len(items))
    await asyncio.gather(*(worker() for _ in range(worker_count)))

    if errors:
        raise errors[0]
    return results  # type: ignore[return-value]
