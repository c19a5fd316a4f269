"""
Outcome catalog: the bets the engine can predict and their narratives
"""
from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional, Tuple

from bettingai.exceptions import InvalidInput
from bettingai.models import BetCategory, OutcomeTemplate

CATALOG_VERSION = "1.0.0"
MIN_VARIANTS = 2


class OutcomeCatalog:
    """
    Immutable set of bet categories and their outcome templates

    Built once at start-up and shared by reference. Authoring mistakes
    (an empty category, a template filed under an undeclared category,
    too few narrative variants) are rejected here instead of at render time.
    """

    def __init__(self, templates: Iterable[OutcomeTemplate],
                 categories: Optional[Iterable[BetCategory]] = None,
                 version: str = CATALOG_VERSION):
        """
        Initialize the catalog

        Args:
            templates: Outcome templates, in display order
            categories: Declared categories (default: every BetCategory)
            version: Catalog data version
        """
        declared = tuple(BetCategory) if categories is None else tuple(dict.fromkeys(categories))
        grouped: Dict[BetCategory, List[OutcomeTemplate]] = {category: [] for category in declared}

        for template in templates:
            if template.category not in grouped:
                raise InvalidInput(
                    f"Template {template.bet_type!r} uses undeclared category "
                    f"{template.category.value}"
                )
            if len(template.reasons) < MIN_VARIANTS or len(template.analyses) < MIN_VARIANTS:
                raise InvalidInput(
                    f"Template {template.bet_type!r} needs at least {MIN_VARIANTS} "
                    f"reason and analysis variants"
                )
            grouped[template.category].append(template)

        if not grouped:
            raise InvalidInput("Catalog declares no categories")
        for category, entries in grouped.items():
            if not entries:
                raise InvalidInput(f"No templates for category {category.value}")

        self.version = version
        self._templates: Dict[BetCategory, Tuple[OutcomeTemplate, ...]] = {
            category: tuple(entries) for category, entries in grouped.items()
        }

    @property
    def categories(self) -> Tuple[BetCategory, ...]:
        """Declared categories in declaration order"""
        return tuple(self._templates)

    def list_categories(self) -> FrozenSet[BetCategory]:
        """Set of declared categories"""
        return frozenset(self._templates)

    def templates_for(self, category: BetCategory) -> Tuple[OutcomeTemplate, ...]:
        """Templates of a declared category, never empty"""
        try:
            return self._templates[category]
        except KeyError:
            raise InvalidInput(f"Category {category} is not in the catalog") from None

    def __iter__(self) -> Iterator[OutcomeTemplate]:
        for entries in self._templates.values():
            yield from entries

    def __len__(self) -> int:
        return sum(len(entries) for entries in self._templates.values())


DEFAULT_TEMPLATES = (
    # Match winner
    OutcomeTemplate(
        BetCategory.MATCH_WINNER, "Home win (1)", "🏠",
        reasons=(
            "The home side has won most of its recent games in front of its own fans.",
            "Home advantage puts {bet} at {probability}% in our model.",
            "Recent form at home makes {bet} the natural pick.",
        ),
        analyses=(
            "The hosts press high and create more chances in the first half. The visitors struggle to keep clean sheets on the road.",
            "Head-to-head history favours the home team and their attack is in good shape.",
        ),
        weight=1.5,
    ),
    OutcomeTemplate(
        BetCategory.MATCH_WINNER, "Away win (2)", "✈️",
        reasons=(
            "The visitors are travelling in strong form and look sharper on paper.",
            "Our read puts {bet} at {probability}% thanks to the away side's momentum.",
        ),
        analyses=(
            "The away team has the better squad depth and thrives on the counter. The hosts have leaked goals in recent weeks.",
            "Away form has been steady and the home defence shows clear weaknesses.",
        ),
    ),
    OutcomeTemplate(
        BetCategory.MATCH_WINNER, "Draw (X)", "🤝",
        reasons=(
            "Two evenly matched teams point to a shared result.",
            "With little to separate the sides, {bet} is rated {probability}% likely.",
        ),
        analyses=(
            "Both teams play cautiously in big games and rarely open up. A tight midfield battle is expected.",
            "Neither side has a clear edge in form or head-to-head record.",
        ),
        weight=0.7,
    ),
    OutcomeTemplate(
        BetCategory.MATCH_WINNER, "Double chance 1X", "🛡️",
        reasons=(
            "Covering the home win and the draw keeps the risk low.",
            "The hosts are hard to beat, which makes {bet} a {probability}% call.",
        ),
        analyses=(
            "The home side has lost only rarely this season. Even a cautious game plan should leave them with a point.",
            "A safety-first market for a home team that seldom loses in front of its own crowd.",
        ),
    ),
    # Over/under
    OutcomeTemplate(
        BetCategory.OVER_UNDER, "Over 2.5 goals", "⚽",
        reasons=(
            "Both attacks are firing and both defences are leaking.",
            "Goals are expected here, so {bet} gets {probability}% from the model.",
        ),
        analyses=(
            "The last meetings between these teams averaged more than three goals. Both coaches favour an open, attacking style.",
            "Expected goals numbers on both sides are well above the league average.",
        ),
        weight=1.5,
    ),
    OutcomeTemplate(
        BetCategory.OVER_UNDER, "Under 2.5 goals", "🧱",
        reasons=(
            "Two disciplined defences should keep this one tight.",
            "A low-scoring game is likely, which puts {bet} at {probability}%.",
        ),
        analyses=(
            "Both teams sit deep and concede few chances. Key attackers are also missing through injury.",
            "Recent matches of both sides have rarely produced more than two goals.",
        ),
    ),
    OutcomeTemplate(
        BetCategory.OVER_UNDER, "Over 9.5 corners", "🚩",
        reasons=(
            "Both teams attack down the flanks and force plenty of corners.",
            "Wide play on both sides makes {bet} a {probability}% shot.",
        ),
        analyses=(
            "The hosts average a high corner count at home. The visitors defend deep and concede set pieces.",
            "Crossing volume for both teams is among the highest in the league.",
        ),
        weight=0.8,
    ),
    # Handicap
    OutcomeTemplate(
        BetCategory.HANDICAP, "Home handicap -1.5", "➖",
        reasons=(
            "The favourite should win by at least two goals.",
            "A clear quality gap puts {bet} at {probability}%.",
        ),
        analyses=(
            "The home side has beaten weaker opponents comfortably this season. The visitors have struggled against top teams.",
            "Squad value and form both point to a convincing home victory.",
        ),
    ),
    OutcomeTemplate(
        BetCategory.HANDICAP, "Away handicap +1.5", "➕",
        reasons=(
            "The underdog rarely loses by more than one goal.",
            "Tight margins in recent games make {bet} a {probability}% pick.",
        ),
        analyses=(
            "The visitors defend compactly and keep games close even against strong opponents. A heavy defeat looks unlikely.",
            "Most of their recent losses came by a single goal.",
        ),
    ),
    OutcomeTemplate(
        BetCategory.HANDICAP, "Asian handicap 0 (draw no bet) home", "⚖️",
        reasons=(
            "Backing the hosts with the stake returned on a draw is the smart angle.",
            "Home form makes {bet} worth {probability}% in our book.",
        ),
        analyses=(
            "The hosts are slight favourites but draws are common in this fixture. This line protects the stake if it ends level.",
            "A good balance between value and safety for a home side in decent form.",
        ),
        weight=0.8,
    ),
    # Correct score
    OutcomeTemplate(
        BetCategory.CORRECT_SCORE, "Correct score 2-1", "🎯",
        reasons=(
            "A narrow home win with goals at both ends fits this matchup.",
            "A 2-1 finish comes out of our simulation at {probability}%.",
        ),
        analyses=(
            "Both teams usually score but the hosts have more firepower. A late winner is a familiar pattern for them.",
            "The hosts create more but their defence tends to concede once per game.",
        ),
    ),
    OutcomeTemplate(
        BetCategory.CORRECT_SCORE, "Correct score 1-1", "🎯",
        reasons=(
            "A cagey game with one goal each looks the likeliest outcome.",
            "Balanced sides make a 1-1 draw a {probability}% shout.",
        ),
        analyses=(
            "Both teams have drawn a lot of recent matches with this exact score. Neither coach takes risks away from home.",
            "Defences are solid but not airtight, so one goal per side fits the profile.",
        ),
    ),
    OutcomeTemplate(
        BetCategory.CORRECT_SCORE, "Correct score 0-0", "🥶",
        reasons=(
            "Two struggling attacks could easily cancel each other out.",
            "Our model rates a goalless draw at {probability}%.",
        ),
        analyses=(
            "Both teams are near the bottom of the scoring charts. The stakes make a cautious game even more likely.",
            "Goalkeepers on both sides are in excellent form.",
        ),
        weight=0.6,
    ),
    # Both teams to score
    OutcomeTemplate(
        BetCategory.BOTH_TEAMS_SCORE, "Both teams to score: Yes", "🔥",
        reasons=(
            "Neither defence has kept a clean sheet in weeks.",
            "Attacking quality on both sides makes {bet} a {probability}% call.",
        ),
        analyses=(
            "Both teams have scored in most of their recent matches. Their defensive records are shaky.",
            "Expected goals against are high for both sides, so a goal at each end is likely.",
        ),
        weight=1.3,
    ),
    OutcomeTemplate(
        BetCategory.BOTH_TEAMS_SCORE, "Both teams to score: No", "🚫",
        reasons=(
            "One of these attacks has gone quiet recently.",
            "A clean sheet on one side puts {bet} at {probability}%.",
        ),
        analyses=(
            "The away team has failed to score in several of its last games. The hosts are strong at the back.",
            "One defence is among the best in the league and should shut the game down.",
        ),
    ),
    # Specials
    OutcomeTemplate(
        BetCategory.SPECIAL, "Penalty awarded in the match", "🥅",
        reasons=(
            "Aggressive defending in the box makes a spot kick plausible.",
            "Recent refereeing trends give a penalty a {probability}% chance.",
        ),
        analyses=(
            "The referee has awarded penalties at an above-average rate this season. Both teams commit plenty of fouls in the box.",
            "Quick wingers on both sides draw contact and force defenders into rash challenges.",
        ),
        weight=0.7,
    ),
    OutcomeTemplate(
        BetCategory.SPECIAL, "Red card shown", "🟥",
        reasons=(
            "A heated rivalry often ends with someone sent off.",
            "Tempers run high here, which puts a sending-off at {probability}%.",
        ),
        analyses=(
            "Both teams lead the league in yellow cards. The referee is known for a strict approach.",
            "Previous meetings between these sides have been tense and physical.",
        ),
        weight=0.5,
    ),
    OutcomeTemplate(
        BetCategory.SPECIAL, "First goal before the 30th minute", "⏱️",
        reasons=(
            "Both teams start fast and tend to score early.",
            "Early pressure makes an opening goal inside half an hour a {probability}% pick.",
        ),
        analyses=(
            "Most of the goals in both teams' recent games came in the opening half hour. The hosts like to push from the first whistle.",
            "High pressing from kick-off usually forces early mistakes in this fixture.",
        ),
    ),
)

DEFAULT_CATALOG = OutcomeCatalog(DEFAULT_TEMPLATES)
