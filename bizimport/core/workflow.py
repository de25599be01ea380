from __future__ import annotations

import time
from typing import List

from loguru import logger

from .workflow_types import WorkflowContext


class WorkflowRunner:
    def __init__(self, nodes: List):
        self.nodes = nodes

    async def run(self, ctx: WorkflowContext) -> WorkflowContext:
        for node in self.nodes:
            started = time.perf_counter()
            ctx = await node.run(ctx)
            logger.debug("[{}] {} done in {:.0f} ms", ctx.search_id, node.name, (time.perf_counter() - started) * 1000)
        return ctx
