"""
Known vocabulary of the card-search grammar.

Two read-only sets: the search keys the backend accepts and the oracle
tags registered in the backend's tag registry. Anything outside these
sets is rewritten or dropped by the grammar validator.

INVARIANT: These sets are never mutated at runtime.
"""

# Keys accepted before an operator (``key:value``, ``key<=value``, ...)
VALID_SEARCH_KEYS: frozenset[str] = frozenset(
    {
        # Color and identity
        "c",
        "color",
        "id",
        "identity",
        "ci",
        "commander",
        "devotion",
        "produces",
        # Types and text
        "t",
        "type",
        "o",
        "oracle",
        "fo",
        "fulloracle",
        "kw",
        "keyword",
        "name",
        "flavor",
        "ft",
        # Mana and stats
        "m",
        "mana",
        "mv",
        "cmc",
        "manavalue",
        "pow",
        "power",
        "tou",
        "toughness",
        "pt",
        "powtou",
        "loy",
        "loyalty",
        # Printing
        "r",
        "rarity",
        "s",
        "set",
        "e",
        "edition",
        "b",
        "block",
        "cn",
        "number",
        "st",
        "prints",
        "lang",
        "language",
        "in",
        "year",
        "date",
        "new",
        # Legality
        "f",
        "format",
        "legal",
        "banned",
        "restricted",
        "game",
        # Presentation
        "a",
        "artist",
        "art",
        "atag",
        "arttag",
        "wm",
        "watermark",
        "border",
        "frame",
        # Price
        "usd",
        "eur",
        "tix",
        "cheapest",
        # Flags and ordering
        "is",
        "not",
        "has",
        "include",
        "unique",
        "order",
        "sort",
        "direction",
        "dir",
        "prefer",
        "display",
        "as",
        "cube",
        # Oracle tags and their aliases
        "otag",
        "oracletag",
        "function",
    }
)

# Keys that are aliases of ``otag``; rewritten to ``otag`` during validation
OTAG_ALIASES: frozenset[str] = frozenset({"oracletag", "function"})

# Keys whose value names a set; a four-digit year here is a malformed date filter
SET_KEYS: frozenset[str] = frozenset({"s", "set", "e", "edition"})

# Oracle tags present in the backend's tag registry
KNOWN_OTAGS: frozenset[str] = frozenset(
    {
        # Ramp and mana
        "ramp",
        "mana-rock",
        "manarock",
        "mana-dork",
        "mana-doubler",
        "mana-sink",
        "ritual",
        "extra-land",
        "cost-reducer",
        # Card advantage
        "draw",
        "cantrip",
        "loot",
        "rummage",
        "wheel",
        "impulse-draw",
        "scry",
        "surveil",
        "tutor",
        # Removal
        "removal",
        "spot-removal",
        "creature-removal",
        "artifact-removal",
        "enchantment-removal",
        "planeswalker-removal",
        "removal-artifact",
        "removal-creature",
        "removal-enchantment",
        "removal-land",
        "removal-planeswalker",
        "board-wipe",
        "boardwipe",
        "mass-removal",
        "graveyard-hate",
        "banish",
        "bite",
        "burn",
        "pinger",
        "naturalize",
        "pacifism",
        "balance",
        # Counterspells
        "counter",
        # Graveyard
        "recursion",
        "reanimate",
        "regrowth",
        "self-mill",
        "mulch",
        "discard-outlet",
        "graveyard-order-matters",
        "activate-from-graveyard",
        "cast-from-graveyard",
        # Life and combat
        "lifegain",
        "soul-warden-ability",
        "fog",
        "combat-trick",
        "evasion",
        "overrun",
        "lord",
        "anthem",
        "attack-trigger",
        "pseudo-haste",
        "extra-combat",
        "battalion",
        "bushido",
        # Blink and bounce
        "blink",
        "flicker",
        "bounce",
        # Copy
        "copy",
        "copy-permanent",
        "copy-spell",
        "clone",
        # Control
        "hatebear",
        "pillowfort",
        "punisher",
        "tapper",
        "untapper",
        # Theft
        "theft",
        "threaten",
        "bribery",
        # Sacrifice
        "sacrifice-outlet",
        "free-sacrifice-outlet",
        "death-trigger",
        "synergy-sacrifice",
        "synergy-lifegain",
        "synergy-discard",
        "synergy-equipment",
        "synergy-proliferate",
        # Ability granting
        "gives-flash",
        "gives-hexproof",
        "gives-haste",
        "gives-flying",
        "gives-trample",
        "gives-vigilance",
        "gives-deathtouch",
        "gives-lifelink",
        "gives-first-strike",
        "gives-double-strike",
        "gives-menace",
        "gives-reach",
        "gives-protection",
        "gives-indestructible",
        # Counters
        "counters-matter",
        "counter-doubler",
        "counter-movement",
        # Lands
        "landfall",
        "enchantress",
        "painland",
        "bounceland",
        "boltland",
        # Special effects
        "extra-turn",
        "polymorph",
        "egg",
        "win-condition",
        "alternate-win-condition",
        "activated-ability",
        "affinity",
        "persist",
        "plunder",
        "revolt",
    }
)
