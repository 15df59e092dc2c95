"""
Ordered multi-step execution for handlers whose steps depend on each other.

Each stage names the context keys it consumes. A stage's result is stored
in the context under the stage's own name, so later stages can use it.
Dependencies are checked when the pipeline is built: a stage may only
require the pipeline inputs or stages that run before it.
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Iterable, Sequence, Tuple

logger = logging.getLogger(__name__)

StageFunc = Callable[[Dict[str, Any]], Awaitable[Any]]


@dataclass(frozen=True)
class Stage:
    """A named step of a pipeline."""

    name: str
    run: StageFunc
    requires: Tuple[str, ...] = ()


class Pipeline:
    """Runs stages strictly in order; a failing stage aborts the rest."""

    def __init__(self, name: str, inputs: Iterable[str], stages: Sequence[Stage]):
        self.name = name
        self.inputs = tuple(inputs)
        self.stages = tuple(stages)

        available = set(self.inputs)
        for stage in self.stages:
            if stage.name in available:
                raise ValueError(f"Pipeline '{name}': duplicate key '{stage.name}'")
            missing = [key for key in stage.requires if key not in available]
            if missing:
                raise ValueError(
                    f"Pipeline '{name}': stage '{stage.name}' requires {missing} "
                    f"which no earlier stage provides"
                )
            available.add(stage.name)

    async def run(self, **inputs: Any) -> Dict[str, Any]:
        """
        Execute all stages.

        Args:
            **inputs: Values for every declared input

        Returns:
            The context: inputs plus one entry per completed stage
        """
        missing = [key for key in self.inputs if key not in inputs]
        if missing:
            raise ValueError(f"Pipeline '{self.name}': missing inputs {missing}")

        context: Dict[str, Any] = dict(inputs)
        for stage in self.stages:
            logger.debug("%s: running stage %s", self.name, stage.name)
            try:
                context[stage.name] = await stage.run(context)
            except Exception:
                logger.debug("%s: stage %s failed, aborting", self.name, stage.name)
                raise
        return context
