from __future__ import annotations
from typing import Callable, Iterable, List, Optional

from ..config import CsimConfig
from ..trace.parser import AccessKind, TraceRecord, read_trace
from ..utils.logging import get_logger
from .cache import CacheModel, Outcome

logger = get_logger(__name__)


def replay_record(model: CacheModel, record: TraceRecord) -> List[Outcome]:
    """Applies one record to the cache and returns the outcome of each access.

    Instruction fetches are ignored, loads and stores access the cache once,
    and a modify is a load followed by a store to the same address.
    """
    return [model.access(record.address) for _ in range(record.kind.access_count)]


def replay(
    records: Iterable[TraceRecord],
    model: CacheModel,
    echo: Optional[Callable[[str], None]] = None,
) -> CacheModel:
    """Replays `records` against `model` in order.

    When `echo` is given, every data record is reported as
    `<kind> <addr>,<size> <outcomes...>`, e.g. `M 20,1 miss hit`.
    """
    for record in records:
        if record.kind is AccessKind.INSTRUCTION:
            continue
        outcomes = replay_record(model, record)
        if echo is not None:
            echo(" ".join([str(record)] + [o.value for o in outcomes]))
    return model


def run(config: CsimConfig) -> CacheModel:
    """
    Runs the simulation described by `config` and returns the final cache.

    The config is validated before the cache is built. A trace that becomes
    unreadable part-way through raises TraceSourceError; the partially
    filled model is discarded with the exception.
    """
    config.validate()
    model = CacheModel.from_config(config)
    logger.info(
        f"Simulating {model.num_sets} sets x {model.associativity} lines x "
        f"{model.block_size}B blocks on {config.trace}"
    )
    replay(read_trace(config.trace), model, echo=print if config.verbose else None)
    logger.info(f"Replayed {model.accesses} accesses")
    return model
