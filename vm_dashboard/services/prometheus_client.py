from typing import Any, Dict, Optional

import httpx


def extract_sample(payload: Dict[str, Any]) -> Optional[float]:
    """
    Return the value of the first series in an instant-query response.

    Prometheus answers with
    ``{"data": {"result": [{"value": [<timestamp>, "<number>"]}, ...]}}``.
    An empty result list means "no data" and yields None. A payload that does
    not have this shape raises KeyError, IndexError, TypeError or ValueError.
    """
    result = payload["data"]["result"]
    if len(result) == 0:
        return None
    return float(result[0]["value"][1])


async def query_sample(client: httpx.AsyncClient, url: str, query: str) -> Optional[float]:
    """
    Run a single instant query and return its first sample.

    Non-2xx responses raise httpx.HTTPStatusError; callers decide how to
    degrade.
    """
    response = await client.get(url, params={"query": query})
    response.raise_for_status()
    return extract_sample(response.json())
