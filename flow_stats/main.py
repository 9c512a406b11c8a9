import logging
import sys
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, cast

import hydra
from hydra.core.config_store import ConfigStore
from hydra.utils import instantiate, to_absolute_path
from omegaconf import MISSING, OmegaConf

from flow_stats.stats.config import FlowStatsConfig, register_stats_configs
from flow_stats.stats.flow import FlowStats
from flow_stats.utils.structlog import SL, color_enabled

REMOVE_PREFIX = "del "


@dataclass
class MainConfig:
    defaults: list[Any] = field(
        default_factory=lambda: [
            "_self_",
            {"stats": "plain"},
        ]
    )
    stats: FlowStatsConfig = MISSING
    # "-" reads from stdin
    input: str = "-"


OmegaConf.register_new_resolver("colorlog", lambda: color_enabled)

cs = ConfigStore.instance()
cs.store(name="config", node=MainConfig)
register_stats_configs()

log = logging.getLogger(__name__)


def parse_line(line: str) -> tuple[bool, float, float] | None:
    """Parses ``value [weight]``, optionally prefixed by ``del ``.

    Returns ``(remove, value, weight)``, or None for blank and comment lines.
    Raises ValueError on anything else.
    """
    line = line.strip()
    if not line or line.startswith("#"):
        return None
    remove = line.startswith(REMOVE_PREFIX)
    parts = line.removeprefix(REMOVE_PREFIX).split()
    if len(parts) not in (1, 2):
        raise ValueError(f"expected 'value [weight]', got {len(parts)} fields")
    value = float(parts[0])
    weight = float(parts[1]) if len(parts) == 2 else 1.0
    return remove, value, weight


def feed_lines(stats: FlowStats, lines: Iterable[str]) -> int:
    fed = 0
    for lineno, line in enumerate(lines, start=1):
        try:
            parsed = parse_line(line)
        except ValueError as e:
            log.warning(SL("Skipping malformed line", line=lineno, error=str(e)))
            continue
        if parsed is None:
            continue

        remove, value, weight = parsed
        if remove:
            stats.remove(value, weight)
        else:
            stats.add(value, weight)
        fed += 1
    return fed


@hydra.main(version_base=None, config_path="conf", config_name="default")
def my_main(cfg: MainConfig):
    stats = cast(FlowStats, instantiate(cfg.stats))
    log.debug(
        SL(
            "Accumulator details",
            kind=type(stats).__name__,
            negative_variance=stats.negative_variance,
        )
    )

    if cfg.input == "-":
        fed = feed_lines(stats, sys.stdin)
    else:
        with open(to_absolute_path(cfg.input)) as f:
            fed = feed_lines(stats, f)

    log.info(SL("Summary", lines=fed, **stats.info()))


if __name__ == "__main__":
    my_main()
