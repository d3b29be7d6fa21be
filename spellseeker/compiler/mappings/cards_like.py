"""
"Cards like X" functional-equivalence mappings.

Maps a famous card's name to a query for cards that do the same job,
rather than cards that mention the name.
"""

CARDS_LIKE: dict[str, str] = {
    # Ramp
    "cultivate": 'otag:ramp o:"search your library" o:"basic land"',
    "kodama's reach": 'otag:ramp o:"search your library" o:"basic land"',
    "rampant growth": "otag:ramp mv<=2",
    "nature's lore": 'otag:ramp mv<=2 o:"forest"',
    "farseek": "otag:ramp mv=2",
    "sol ring": 't:artifact mv<=2 o:"add" o:"{C}{C}"',
    "mana crypt": 't:artifact mv=0 o:"add"',
    "arcane signet": 't:artifact mv=2 o:"add" o:"color"',
    "llanowar elves": 'otag:mana-dork mv=1 o:"add {G}"',
    "birds of paradise": 'otag:mana-dork mv=1 o:"add" o:"any color"',
    # Card draw
    "brainstorm": 'o:"draw" o:"cards" o:"put" o:"top"',
    "ponder": 'o:"look at the top" o:"shuffle"',
    "preordain": 'o:"scry" o:"draw a card" mv<=2',
    "rhystic study": 'o:"whenever" o:"opponent" o:"pay" o:"draw"',
    "dark confidant": 'o:"beginning of your upkeep" o:"draw" o:"life"',
    # Removal
    "swords to plowshares": 'o:"exile target creature" mv<=2',
    "path to exile": 'o:"exile target creature" mv<=2',
    "wrath of god": "otag:board-wipe t:sorcery",
    "damnation": "otag:board-wipe t:sorcery",
    "cyclonic rift": 'otag:bounce o:"you don\'t control"',
    # Counters
    "counterspell": "otag:counter mv<=2",
    "mana drain": "otag:counter mv<=2",
    "force of will": 'otag:counter o:"without paying"',
    # Aristocrats
    "blood artist": 'otag:death-trigger o:"loses" o:"life"',
    "zulaport cutthroat": 'otag:death-trigger o:"loses" o:"life"',
    "viscera seer": "otag:free-sacrifice-outlet",
    # Tutors
    "demonic tutor": 'otag:tutor o:"search your library" o:"hand"',
    "vampiric tutor": 'otag:tutor o:"search your library" o:"top"',
    "enlightened tutor": 'otag:tutor (o:"artifact" or o:"enchantment") o:"top"',
    "mystical tutor": 'otag:tutor (o:"instant" or o:"sorcery") o:"top"',
    "worldly tutor": 'otag:tutor o:"creature card" o:"top"',
    # Reanimation
    "reanimate": "otag:reanimate mv<=3",
    "animate dead": "otag:reanimate t:enchantment",
    "exhume": "otag:reanimate",
    # Equipment
    "lightning greaves": 't:equipment o:"haste" (o:"shroud" or o:"hexproof")',
    "swiftfoot boots": 't:equipment o:"haste" o:"hexproof"',
    "skullclamp": 't:equipment o:"draw"',
    # Wheels
    "wheel of fortune": "otag:wheel",
    "windfall": "otag:wheel",
    # Land destruction
    "strip mine": 't:land o:"destroy target land"',
    "ghost quarter": 't:land o:"destroy target" o:"land"',
}
