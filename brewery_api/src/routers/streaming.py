"""
Streamed JSON array responses for list endpoints.
"""

from typing import AsyncIterator

from fastapi.responses import StreamingResponse
from pydantic import BaseModel


async def _json_array(first: BaseModel, rest: AsyncIterator[BaseModel]) -> AsyncIterator[str]:
    try:
        yield "["
        yield first.model_dump_json(by_alias=True)
        async for item in rest:
            yield ","
            yield item.model_dump_json(by_alias=True)
        yield "]"
    finally:
        await rest.aclose()


async def stream_json_array(items: AsyncIterator[BaseModel]) -> StreamingResponse:
    """
    Build a response that writes ``items`` as a JSON array, one element at a time.

    The first element is read before the response starts, so a store failure
    on open still reaches the exception handlers as a 500. Whatever happens
    afterwards, ``items`` is closed when the body finishes or the client
    disconnects.

    Args:
        items: Async generator of camelCase transfer objects

    Returns:
        Streaming ``application/json`` response
    """
    try:
        first = await items.__anext__()
    except StopAsyncIteration:
        await items.aclose()
        return StreamingResponse(iter(["[]"]), media_type="application/json")
    except Exception:
        await items.aclose()
        raise

    return StreamingResponse(_json_array(first, items), media_type="application/json")
