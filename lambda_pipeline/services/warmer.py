"""
Lambda Warmer

Keeps other functions' execution environments initialized by sending them
a `warmupOnly` event. Targets short-circuit in their pipeline without
running any logic.
"""

import asyncio
import logging
from typing import Iterable, Optional

from lambda_pipeline.models.call import LambdaCall
from lambda_pipeline.services.invoker import LambdaInvoker, get_default_invoker

logger = logging.getLogger("lambda_pipeline.warmer")

WARMUP_EVENT = {"warmupOnly": True}


async def warm_function(invoker: LambdaInvoker, function_name: str) -> bool:
    """Send one warm-up event. Failures are logged and reported as False."""
    logger.info(f"Warming up {function_name}")
    try:
        await invoker.invoke_event(function_name, dict(WARMUP_EVENT))
    except Exception as e:
        logger.error(f"Warmup of {function_name} failed: {e}")
        return False
    return True


def warmer_logic_handler(function_names: Iterable[str], invoker: Optional[LambdaInvoker] = None):
    targets = list(function_names)

    async def logic_handler(call: LambdaCall) -> None:
        active_invoker = invoker or get_default_invoker()
        results = await asyncio.gather(
            *(warm_function(active_invoker, name) for name in targets)
        )
        logger.info(f"Warmed {sum(results)}/{len(targets)} functions")

    return logic_handler
