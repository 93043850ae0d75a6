"""Lane-phase analysis from match timelines.

Each timeline is reduced to a few numbers per game (gold, CS, XP and level
differences against the lane opponent at fixed minutes, plus the largest
gold lead and deficit), then averaged over the analysed games.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

import structlog

from riftcoach.core.riot_api.models import TimelineDTO, TimelineFrameDTO
from riftcoach.features.analysis.schemas import TimelineAnalysis
from riftcoach.features.matches.normalizer import NormalizedMatch
from riftcoach.utils.statistics import safe_divide, safe_mean

logger = structlog.get_logger(__name__)

CHECKPOINT_MINUTES = (10, 15)
FRAME_TOLERANCE_MS = 30_000
# Gold lead (or deficit) against the lane opponent that makes a loss a throw
SWING_GOLD = 2000


@dataclass(frozen=True)
class LaneDiff:
    """Player minus lane opponent at one minute."""

    gold: int
    cs: int
    xp: int
    level: int


@dataclass(frozen=True)
class GameTimeline:
    """What one timeline contributes to the aggregate."""

    match_id: str
    win: bool
    diffs: Dict[int, LaneDiff]
    max_lead: int
    max_deficit: int


def frame_at_minute(
    frames: Sequence[TimelineFrameDTO], minute: int
) -> Optional[TimelineFrameDTO]:
    """Frame closest to ``minute``, None when none lies within 30 seconds."""
    target = minute * 60_000
    candidates = [
        f for f in frames if abs(f.timestamp - target) <= FRAME_TOLERANCE_MS
    ]
    if not candidates:
        return None
    return min(candidates, key=lambda f: abs(f.timestamp - target))


def mirror_participant_id(participant_id: int) -> int:
    """Same slot on the other team (1-5 against 6-10)."""
    return participant_id + 5 if participant_id <= 5 else participant_id - 5


def _average(values: Iterable[float]) -> Optional[float]:
    values = list(values)
    return safe_mean(values) if values else None


def _rate(hits: int, total: int) -> Optional[float]:
    return safe_divide(hits, total) * 100 if total else None


class TimelineAnalyzer:
    """Turns timelines into a ``TimelineAnalysis``."""

    def lane_diff(
        self, frame: TimelineFrameDTO, participant_id: int, opponent_id: int
    ) -> Optional[LaneDiff]:
        player = frame.for_participant(participant_id)
        opponent = frame.for_participant(opponent_id)
        if player is None or opponent is None:
            return None
        return LaneDiff(
            gold=player.total_gold - opponent.total_gold,
            cs=player.creep_score - opponent.creep_score,
            xp=player.xp - opponent.xp,
            level=player.level - opponent.level,
        )

    def opponent_id(
        self, match: NormalizedMatch, timeline: TimelineDTO, participant_id: int
    ) -> int:
        """Lane opponent's timeline id, the mirrored slot when unknown."""
        if match.opponent is not None:
            opponent_id = timeline.participant_id(match.opponent.puuid)
            if opponent_id is not None:
                return opponent_id
        return mirror_participant_id(participant_id)

    def analyze_game(
        self, match: NormalizedMatch, timeline: TimelineDTO
    ) -> Optional[GameTimeline]:
        """
        Reduce one timeline to lane differences.

        :param match: The analysed player's view of the match
        :param timeline: Timeline of the same match
        :returns: GameTimeline, or None if the player is not in the timeline
        """
        participant_id = timeline.participant_id(match.participant.puuid)
        if participant_id is None:
            logger.debug(
                "Player missing from timeline",
                match_id=match.match_id,
                puuid=match.participant.puuid,
            )
            return None
        opponent_id = self.opponent_id(match, timeline, participant_id)
        frames = timeline.info.frames

        diffs: Dict[int, LaneDiff] = {}
        for minute in CHECKPOINT_MINUTES:
            frame = frame_at_minute(frames, minute)
            diff = self.lane_diff(frame, participant_id, opponent_id) if frame else None
            if diff is not None:
                diffs[minute] = diff

        gold_diffs = [
            diff.gold
            for diff in (self.lane_diff(f, participant_id, opponent_id) for f in frames)
            if diff is not None
        ]
        return GameTimeline(
            match_id=match.match_id,
            win=match.win,
            diffs=diffs,
            max_lead=max([0] + gold_diffs),
            max_deficit=-min([0] + gold_diffs),
        )

    def aggregate(self, games: Sequence[GameTimeline]) -> Optional[TimelineAnalysis]:
        """Average per-game results; None when there is nothing to average."""
        if not games:
            return None

        at_10 = [g.diffs[10] for g in games if 10 in g.diffs]
        at_15 = [g.diffs[15] for g in games if 15 in g.diffs]
        ahead_at_15 = [g for g in games if 15 in g.diffs and g.diffs[15].gold > 0]
        throws = [g for g in games if g.max_lead >= SWING_GOLD and not g.win]
        comebacks = [g for g in games if g.max_deficit >= SWING_GOLD and g.win]

        return TimelineAnalysis(
            games_with_timeline=len(games),
            avg_gold_diff_at_10=_average(d.gold for d in at_10),
            avg_cs_diff_at_10=_average(d.cs for d in at_10),
            avg_xp_diff_at_10=_average(d.xp for d in at_10),
            avg_level_diff_at_10=_average(d.level for d in at_10),
            avg_gold_diff_at_15=_average(d.gold for d in at_15),
            avg_cs_diff_at_15=_average(d.cs for d in at_15),
            avg_xp_diff_at_15=_average(d.xp for d in at_15),
            lead_rate_at_10=_rate(sum(1 for d in at_10 if d.gold > 0), len(at_10)),
            lead_rate_at_15=_rate(len(ahead_at_15), len(at_15)),
            lead_conversion_rate=_rate(
                sum(1 for g in ahead_at_15 if g.win), len(ahead_at_15)
            ),
            throw_rate=_rate(len(throws), len(games)),
            comeback_rate=_rate(len(comebacks), len(games)),
            avg_max_lead=safe_mean([g.max_lead for g in games]),
            avg_max_deficit=safe_mean([g.max_deficit for g in games]),
        )

    def analyze(
        self,
        matches: Sequence[NormalizedMatch],
        timelines: Mapping[str, TimelineDTO],
    ) -> Optional[TimelineAnalysis]:
        """Analyse the matches that have a downloaded timeline."""
        games: List[GameTimeline] = []
        for match in matches:
            timeline = timelines.get(match.match_id)
            if timeline is None:
                continue
            game = self.analyze_game(match, timeline)
            if game is not None:
                games.append(game)
        return self.aggregate(games)
