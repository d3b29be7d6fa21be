"""
Tag-first concept patterns.

Each entry maps a natural-language concept to an oracle tag, with an
oracle-text fallback used when the tag is not in the known tag registry.
An empty tag means the concept has no tag and always uses its fallback.

Order matters: more specific patterns come before generic ones.
"""

import re
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class TagPattern:
    """One concept pattern: regex, preferred tag, oracle-text fallback."""

    pattern: re.Pattern[str]
    tag: str
    fallback: str | None = None


def _tag(pattern: str, tag: str, fallback: str | None = None) -> TagPattern:
    return TagPattern(re.compile(pattern, re.IGNORECASE), tag, fallback)


_ETB_DOUBLER_FALLBACK = (
    '(o:"triggers an additional time" or o:"one or more triggered abilities" o:"trigger")'
)

# Keywords that other cards grant; "haste enablers" / "gives haste"
ENABLER_KEYWORDS: tuple[str, ...] = (
    "haste",
    "flying",
    "trample",
    "deathtouch",
    "lifelink",
    "menace",
    "hexproof",
    "indestructible",
    "vigilance",
    "first-strike",
    "double-strike",
    "reach",
    "protection",
    "flash",
)

# Token kinds with their own card name capitalization in oracle text
TOKEN_KINDS: tuple[str, ...] = (
    "treasure",
    "food",
    "clue",
    "blood",
    "map",
    "powerstone",
    "incubator",
)


def _enabler_patterns() -> list[TagPattern]:
    patterns: list[TagPattern] = []
    for keyword in ENABLER_KEYWORDS:
        spoken = keyword.replace("-", "[ -]?")
        patterns.append(
            _tag(
                rf"\b(?:{spoken}\s+(?:enablers?|providers?|granters?)"
                rf"|(?:grants?|gives?|giving)\s+{spoken})\b",
                f"gives-{keyword}",
                f'o:"{keyword.replace("-", " ")}"',
            )
        )
    return patterns


def _token_patterns() -> list[TagPattern]:
    patterns: list[TagPattern] = []
    for kind in TOKEN_KINDS:
        patterns.append(
            _tag(
                rf"\b(?:(?:makes?|creates?|generates?|produces?)\s+(?:a\s+)?{kind}s?"
                rf"(?:\s+tokens?)?|{kind}\s+(?:tokens?\s+)?(?:makers?|generators?)"
                rf"|{kind}\s+tokens?)\b",
                "",
                f'o:"create" o:"{kind.capitalize()}"',
            )
        )
    return patterns


TAG_FIRST_PATTERNS: tuple[TagPattern, ...] = (
    # Mana
    _tag(r"\bmana sinks?\b", "mana-sink", 'o:"{X}"'),
    _tag(r"\bmana ?rocks?\b", "manarock", 't:artifact o:"add"'),
    _tag(r"\bmana dorks?\b", "mana-dork", 't:creature o:"add"'),
    _tag(r"\bmana doublers?\b", "mana-doubler", 'o:"add" o:"additional"'),
    _tag(r"\brituals?\b", "ritual", '(t:instant or t:sorcery) o:"add"'),
    _tag(r"\bcost reducers?\b", "cost-reducer", 'o:"cost" o:"less"'),
    _tag(r"\bextra land drops?\b", "extra-land", 'o:"additional land"'),
    _tag(r"\bramp\b", "ramp", 'o:"search your library" o:"land"'),
    # Removal
    _tag(r"\bboard[ -]?wipes?\b", "board-wipe", 'o:"destroy all"'),
    _tag(r"\bwraths?\b", "board-wipe", 'o:"destroy all"'),
    _tag(r"\bsweepers?\b", "board-wipe", 'o:"destroy all"'),
    _tag(r"\bedicts?\b", "creature-removal", 'o:"sacrifice a creature"'),
    _tag(r"\bcreature removal\b", "creature-removal", 'o:"destroy target creature"'),
    _tag(r"\bartifact removal\b", "artifact-removal", 'o:"destroy target artifact"'),
    _tag(r"\benchantment removal\b", "enchantment-removal", 'o:"destroy target enchantment"'),
    _tag(r"\bgraveyard hate\b", "graveyard-hate", 'o:"exile" o:"graveyard"'),
    _tag(r"\bpingers?\b", "pinger", 'o:"deals 1 damage"'),
    _tag(r"\bremoval\b", "removal", 'o:"destroy"'),
    # Counterspells
    _tag(r"\bcounterspells?\b", "counter", 'o:"counter target spell"'),
    _tag(r"\bcounter ?magic\b", "counter", 'o:"counter target spell"'),
    # Card advantage
    _tag(r"\bcantrips?\b", "cantrip", 'o:"draw a card"'),
    _tag(r"\bcard draw\b", "draw", 'o:"draw"'),
    _tag(r"\bdraw(?:s|ing)? cards\b", "draw", 'o:"draw"'),
    _tag(r"\blooting\b|\blooters?\b", "loot", 'o:"draw" o:"discard"'),
    _tag(r"\brummag(?:e|ing)\b", "rummage", 'o:"discard" o:"draw"'),
    _tag(r"\bimpulse draw\b", "impulse-draw", 'o:"exile" o:"until end of turn" o:"play"'),
    _tag(r"\bwheels?\b", "wheel", 'o:"discard" o:"draw"'),
    _tag(r"\btutors?\b", "tutor", 'o:"search your library"'),
    # Graveyard
    _tag(r"\bself[ -]?mill\b", "self-mill", 'o:"mill" o:"you"'),
    _tag(
        r"\b(?:cares? about )?graveyard order(?: matters)?\b",
        "graveyard-order-matters",
        'o:"graveyard" o:"order"',
    ),
    _tag(r"\breanimation\b", "reanimate", 'o:"from your graveyard to the battlefield"'),
    _tag(r"\brecursion\b", "recursion", 'o:"return" o:"from your graveyard"'),
    _tag(r"\bdiscard outlets?\b", "discard-outlet", 'o:"discard a card"'),
    _tag(r"\bsac(?:rifice)? outlets?\b", "sacrifice-outlet", 'o:"sacrifice a"'),
    _tag(r"\bdeath triggers?\b(?! doubl)", "death-trigger", 'o:"whenever" o:"dies"'),
    # Life and combat
    _tag(r"\bsoul sisters?\b", "soul-warden-ability", 'o:"gain 1 life" o:"creature enters"'),
    _tag(r"\blifegain\b|\blife gain\b", "lifegain", 'o:"gain" o:"life"'),
    _tag(r"\bfogs?\b", "fog", 'o:"prevent all combat damage"'),
    _tag(r"\bcombat tricks?\b", "combat-trick", 't:instant o:"target creature gets"'),
    _tag(r"\boverruns?\b", "overrun", 'o:"creatures you control get" o:"trample"'),
    _tag(r"\banthems?\b", "anthem", 'o:"creatures you control get"'),
    _tag(r"\blords?\b", "lord", 'o:"other" o:"you control get"'),
    _tag(r"\bextra turns?\b", "extra-turn", 'o:"extra turn"'),
    _tag(r"\bextra combats?\b", "extra-combat", 'o:"additional combat"'),
    # Blink and copy
    _tag(r"\bblink(?:s|ing)?\b", "blink", 'o:"exile" o:"return" o:"battlefield"'),
    _tag(r"\bflicker(?:s|ing)?\b", "flicker", 'o:"exile" o:"return" o:"battlefield"'),
    _tag(r"\bbounce\b", "bounce", 'o:"return target" o:"to its owner\'s hand"'),
    _tag(r"\bclones?\b", "clone", 'o:"copy of" o:"creature"'),
    # Control and theft
    _tag(r"\bhatebears?\b", "hatebear", 't:creature o:"can\'t"'),
    _tag(r"\bpillow ?fort\b", "pillowfort", 'o:"can\'t attack you"'),
    _tag(r"\bthreaten effects?\b", "threaten", 'o:"gain control" o:"until end of turn"'),
    _tag(r"\b(?:theft|steal(?:s|ing)?|mind control)\b", "theft", 'o:"gain control"'),
    _tag(r"\buntap(?:per)?s?\b", "untapper", 'o:"untap"'),
    _tag(r"\btappers?\b", "tapper", 'o:"tap target"'),
    # Triggers and counters
    _tag(r"\bcounters? matter\b", "counters-matter", 'o:"counter" o:"on"'),
    _tag(r"\bcounter doublers?\b", "counter-doubler", 'o:"twice that many"'),
    _tag(r"\blandfall\b", "landfall", 'o:"whenever a land enters"'),
    _tag(r"\benchantress(?:es)?\b", "enchantress", 'o:"whenever you cast an enchantment"'),
    _tag(r"\betb doubl(?:ers?|ing)\b", "etb-doubler", _ETB_DOUBLER_FALLBACK),
    _tag(r"\bdoubles? etbs?\b", "etb-doubler", _ETB_DOUBLER_FALLBACK),
    _tag(
        r"\bpanharmonicon(?:[ -]?like)?(?:\s+(?:effects?|cards?))?\b",
        "etb-doubler",
        _ETB_DOUBLER_FALLBACK,
    ),
    _tag(
        r"\bdeath trigger doubl(?:ers?|ing)\b",
        "death-trigger-doubler",
        '(o:"triggers an additional time" o:"dies")',
    ),
    _tag(
        r"\bltb doubl(?:ers?|ing)\b",
        "ltb-doubler",
        '(o:"triggers an additional time" o:"leaves")',
    ),
    _tag(r"\bgoad(?:ing|ed)?(?:\s+(?:creatures?|effects?))?\b", "goad", "o:goad"),
    _tag(r"\bforces? (?:creatures )?to attack\b", "goad", '(o:goad or o:"attacks each combat")'),
    _tag(r"\bwin con(?:dition)?s?\b", "win-condition", 'o:"you win the game"'),
    *_enabler_patterns(),
    *_token_patterns(),
)

# "dogs in the art", "art with dragons"
ART_TAG_SUBJECTS: tuple[str, ...] = (
    "cow",
    "dog",
    "cat",
    "tree",
    "mountain",
    "ocean",
    "skull",
    "hook",
    "axe",
    "sword",
    "shield",
    "armor",
    "helmet",
    "fire",
    "water",
    "dragon",
    "angel",
    "demon",
    "horse",
    "wolf",
    "bird",
    "snake",
    "spider",
    "moon",
    "castle",
)

_ART_IRREGULAR_PLURALS: dict[str, str] = {
    "wolf": "wolves",
    "axe": "axes",
    "armor": "armou?r",
}

ART_SUBJECT_PATTERN = re.compile(
    r"\b(?P<subject>[a-z]+) in (?:the )?art(?:work)?\b"
    r"|\bart(?:work)? (?:with|showing|depicting|featuring) (?:an? )?(?P<shown>[a-z]+)\b",
    re.IGNORECASE,
)


def art_subject(word: str) -> str:
    """Map a spoken art subject (possibly plural) to its art tag."""
    lowered = word.lower()
    for subject in ART_TAG_SUBJECTS:
        plural = _ART_IRREGULAR_PLURALS.get(subject, f"{subject}s")
        if lowered == subject or re.fullmatch(plural, lowered):
            return subject
    if lowered.endswith("s") and len(lowered) > 3:
        return lowered[:-1]
    return lowered
