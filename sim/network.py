"""In-process two-party network: a connected socket pair and a run harness."""

import asyncio
import socket

from core.config import DEFAULT_RADIX
from protocols.channel import SecureChannel


async def open_local_pair(radix: int = DEFAULT_RADIX,
                          timeout: float | None = None
                          ) -> tuple[SecureChannel, SecureChannel]:
    """Two channels joined by a real OS socket pair, so buffer limits apply
    exactly as they would across processes."""
    sock_1, sock_2 = socket.socketpair()
    reader_1, writer_1 = await asyncio.open_connection(sock=sock_1)
    reader_2, writer_2 = await asyncio.open_connection(sock=sock_2)
    return (SecureChannel(reader_1, writer_1, radix=radix, timeout=timeout),
            SecureChannel(reader_2, writer_2, radix=radix, timeout=timeout))


async def run_parties(program_1, program_2):
    """Run both parties' coroutines concurrently and return both results.

    If either side fails, the other is cancelled (it would otherwise wait on
    its peer forever) and the failure is raised.
    """
    tasks = [asyncio.create_task(program_1), asyncio.create_task(program_2)]
    done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
    for task in pending:
        task.cancel()
    for task in pending:
        try:
            await task
        except asyncio.CancelledError:
            pass
    for task in tasks:
        if task in done and task.exception() is not None:
            raise task.exception()
    return tasks[0].result(), tasks[1].result()
