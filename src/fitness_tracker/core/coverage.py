"""
Muscle coverage for a single session.

Maps the session's working sets onto the muscle regions of its split
and scores how thoroughly each region has been trained:

    score(region)    = Σ working_sets × role_weight   (primary 1.0, secondary 0.5)
    progress(region) = min(1, score / TARGET_SCORE_PER_REGION)
    progress(group)  = mean(progress(region) for region in group)

Curated exercise → region maps are authoritative.  A keyword heuristic
over exercise names is available as a separate, opt-in fallback for
exercises that have no curated map inside the split.

The report is rebuilt from scratch on every call; callers recompute it
after each set/exercise mutation rather than patching it.
"""

from dataclasses import dataclass, field

from .config import COVERED_THRESHOLD, ROLE_WEIGHTS, TARGET_SCORE_PER_REGION
from .models import Exercise, WorkoutSession, WorkoutType


@dataclass(frozen=True)
class RegionCoverage:
    """Coverage of one region within the split."""

    id: str
    name: str
    touched: bool                 # score > 0
    working_set_count: int        # unweighted working sets hitting this region
    score: float                  # weighted by role
    progress: float               # 0.0 to 1.0
    contributing_exercises: list[str] = field(default_factory=list)

    @property
    def is_covered(self) -> bool:
        """Substantially covered (progress ≥ COVERED_THRESHOLD)."""
        return self.progress >= COVERED_THRESHOLD


@dataclass(frozen=True)
class GroupCoverage:
    """Coverage of one muscle group; touched_regions counts covered regions."""

    id: str
    name: str
    touched_regions: int
    total_regions: int
    progress: float
    regions: list[RegionCoverage] = field(default_factory=list)


@dataclass(frozen=True)
class CoverageReport:
    split_name: str
    groups: list[GroupCoverage] = field(default_factory=list)

    @property
    def overall_progress(self) -> float:
        """Mean group progress (0.0 for a split with no groups)."""
        if not self.groups:
            return 0.0
        return sum(g.progress for g in self.groups) / len(self.groups)


# ---------------------------------------------------------------------------
# Keyword fallback
# ---------------------------------------------------------------------------

# Lowercase region name → substrings of lowercase exercise names.
REGION_KEYWORDS: dict[str, tuple[str, ...]] = {
    "upper": ("incline",),
    "mid": ("bench", "press", "fly", "push-up"),
    "lower": ("decline", "dip", "deadlift", "back extension"),
    "long": ("overhead", "skull", "incline"),
    "lateral": ("pushdown", "pressdown", "lateral", "kickback"),
    "medial": ("close-grip", "close grip", "dip", "pushdown"),
    "anterior": ("press", "front raise"),
    "posterior": ("rear delt", "face pull", "reverse fly"),
    "lats": ("pulldown", "pull-up", "chin-up", "straight-arm"),
    "upper back": ("row", "face pull", "rear delt"),
    "lower back": ("deadlift", "rdl", "back extension", "good morning"),
    "short": ("preacher", "concentration", "cable curl"),
    "brachialis": ("hammer", "reverse curl"),
    "quads": ("squat", "leg press", "leg extension", "lunge", "split squat", "hack squat"),
    "hamstrings": ("rdl", "romanian", "leg curl", "deadlift"),
    "glutes": ("hip thrust", "glute", "lunge", "squat", "deadlift"),
    "calves": ("calf",),
    "upper abs": ("crunch", "sit-up"),
    "lower abs": ("leg raise", "hanging knee", "reverse crunch"),
    "obliques": ("twist", "side plank", "woodchop"),
}


def keyword_region_roles(exercise: Exercise, split: WorkoutType) -> dict[str, str]:
    """
    Heuristic region match by exercise name; every hit counts as primary.

    Regions without a keyword table fall back to their own name.
    """
    name = exercise.name.lower()
    if not name:
        return {}
    matched: dict[str, str] = {}
    for group in split.muscle_groups:
        for region in group.regions:
            key = region.name.lower()
            keywords = REGION_KEYWORDS.get(key, (key,))
            if any(k in name for k in keywords):
                matched[region.id] = "primary"
    return matched


# ---------------------------------------------------------------------------
# Report
# ---------------------------------------------------------------------------


def mapped_region_roles(exercise: Exercise, split_region_ids: set[str]) -> dict[str, str]:
    """
    Curated region → role for one exercise, restricted to the split.

    A region mapped twice keeps its strongest role.
    """
    roles: dict[str, str] = {}
    for muscle_map in exercise.muscle_maps:
        if muscle_map.region_id not in split_region_ids:
            continue
        current = roles.get(muscle_map.region_id)
        if current is None or ROLE_WEIGHTS[muscle_map.role] > ROLE_WEIGHTS[current]:
            roles[muscle_map.region_id] = muscle_map.role
    return roles


def build_report(
    session: WorkoutSession,
    split: WorkoutType,
    use_keyword_fallback: bool = False,
) -> CoverageReport:
    """
    Build the coverage report for one session against its split.

    Args:
        session: Session whose logged exercises are scored
        split: Split defining which groups/regions are scored
        use_keyword_fallback: Match exercise names against REGION_KEYWORDS
            when an exercise has no curated map inside the split

    Returns:
        CoverageReport with groups and regions in split order
    """
    split_region_ids = split.region_ids

    scores: dict[str, float] = {}
    set_counts: dict[str, int] = {}
    contributors: dict[str, set[str]] = {}

    for logged in session.logged_exercises:
        working = sum(1 for s in logged.sets if not s.is_warmup)
        if working == 0:
            continue

        roles = mapped_region_roles(logged.exercise, split_region_ids)
        if not roles and use_keyword_fallback:
            roles = keyword_region_roles(logged.exercise, split)

        for region_id, role in roles.items():
            scores[region_id] = scores.get(region_id, 0.0) + working * ROLE_WEIGHTS[role]
            set_counts[region_id] = set_counts.get(region_id, 0) + working
            contributors.setdefault(region_id, set()).add(logged.exercise.name)

    groups: list[GroupCoverage] = []
    for group in split.muscle_groups:
        regions: list[RegionCoverage] = []
        for region in group.regions:
            score = scores.get(region.id, 0.0)
            regions.append(
                RegionCoverage(
                    id=region.id,
                    name=region.name,
                    touched=score > 0,
                    working_set_count=set_counts.get(region.id, 0),
                    score=score,
                    progress=min(1.0, score / TARGET_SCORE_PER_REGION),
                    contributing_exercises=sorted(contributors.get(region.id, ())),
                )
            )

        group_progress = sum(r.progress for r in regions) / len(regions) if regions else 0.0
        groups.append(
            GroupCoverage(
                id=group.id,
                name=group.name,
                touched_regions=sum(1 for r in regions if r.is_covered),
                total_regions=len(regions),
                progress=group_progress,
                regions=regions,
            )
        )

    return CoverageReport(split_name=split.name, groups=groups)
