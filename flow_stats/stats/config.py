from dataclasses import dataclass

from hydra.core.config_store import ConfigStore

from .flow import NegativeVariancePolicy


@dataclass
class FlowStatsConfig:
    _target_: str = "flow_stats.stats.flow.FlowStats"
    negative_variance: NegativeVariancePolicy = NegativeVariancePolicy.CLAMP


@dataclass
class CheckedFlowStatsConfig(FlowStatsConfig):
    _target_: str = "flow_stats.stats.checked.CheckedFlowStats"


def register_stats_configs(group: str = "stats"):
    cs = ConfigStore.instance()
    cs.store(group=group, name="plain", node=FlowStatsConfig)
    cs.store(group=group, name="checked", node=CheckedFlowStatsConfig)
