"""Recent-form trends over windows of the most recent matches."""

from typing import List, Optional, Sequence

from riftcoach.core.enums import TrendLabel
from riftcoach.features.analysis.schemas import PerformanceTrends
from riftcoach.features.analysis.stats_builder import AggregateStatsBuilder
from riftcoach.features.matches.normalizer import NormalizedMatch
from riftcoach.utils.statistics import safe_mean

WINDOW_SIZE = 5
MAX_TREND_MATCHES = 20
TREND_THRESHOLD = 0.1


def get_trend(values: Sequence[float]) -> TrendLabel:
    """
    Label a windowed series, most recent window first.

    The first ``n // 2`` windows are compared with the rest; a relative
    change beyond 10% either way is a trend.
    """
    if len(values) < 2:
        return TrendLabel.STABLE

    mid = len(values) // 2
    recent_avg = safe_mean(list(values[:mid]))
    older_avg = safe_mean(list(values[mid:]))

    if older_avg == 0:
        return TrendLabel.IMPROVING if recent_avg > 0 else TrendLabel.STABLE

    change = (recent_avg - older_avg) / older_avg
    if change > TREND_THRESHOLD:
        return TrendLabel.IMPROVING
    if change < -TREND_THRESHOLD:
        return TrendLabel.DECLINING
    return TrendLabel.STABLE


class TrendAnalyzer:
    """Builds ``PerformanceTrends`` from matches ordered most recent first."""

    def __init__(self, stats_builder: Optional[AggregateStatsBuilder] = None):
        self.stats_builder = stats_builder or AggregateStatsBuilder()

    def windows(self, matches: Sequence[NormalizedMatch]) -> List[Sequence[NormalizedMatch]]:
        recent = matches[:MAX_TREND_MATCHES]
        return [
            recent[start : start + WINDOW_SIZE]
            for start in range(0, len(recent), WINDOW_SIZE)
        ]

    def analyze(self, matches: Sequence[NormalizedMatch]) -> PerformanceTrends:
        recent_kda: List[float] = []
        recent_win_rate: List[float] = []
        recent_cs: List[float] = []
        recent_vision: List[float] = []
        recent_damage: List[float] = []

        for window in self.windows(matches):
            stats = self.stats_builder.build(window)
            recent_kda.append(stats.avg_kda)
            recent_win_rate.append(stats.win_rate)
            recent_cs.append(stats.avg_cs_per_min)
            recent_vision.append(stats.avg_vision_per_min)
            recent_damage.append(stats.avg_damage_per_min)

        return PerformanceTrends(
            recent_kda=recent_kda,
            recent_win_rate=recent_win_rate,
            recent_cs=recent_cs,
            recent_vision=recent_vision,
            recent_damage=recent_damage,
            kda_trend=get_trend(recent_kda),
            win_rate_trend=get_trend(recent_win_rate),
            cs_trend=get_trend(recent_cs),
            vision_trend=get_trend(recent_vision),
            damage_trend=get_trend(recent_damage),
        )
