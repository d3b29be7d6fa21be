"""
Deck archetype and strategy mappings.

Maps strategy names to compound grammar queries. Matched only when the
word stands alone as a deck theme, not inside a verb phrase such as
"sacrifice a creature".
"""

ARCHETYPES: dict[str, str] = {
    "aristocrats": '(otag:sacrifice-outlet or (o:"whenever" (o:"dies" or o:"sacrifice")))',
    "sacrifice": '(otag:sacrifice-outlet or (o:"whenever" (o:"dies" or o:"sacrifice")))',
    "spellslinger": (
        '(t:instant or t:sorcery or (o:"whenever you cast" (o:"instant" or o:"sorcery")))'
    ),
    "storm": '(kw:storm or o:"copy" o:"spell")',
    "tokens": 'o:"create" o:"token"',
    "go wide": 'o:"create" o:"token"',
    "aggro": "t:creature mv<=3 pow>=2",
    "voltron": '(t:equipment or t:aura or o:"equipped creature" or o:"enchanted creature")',
    "reanimator": "otag:reanimate",
    "control": "(otag:removal or otag:board-wipe or otag:counter)",
    "stax": "(otag:hatebear or otag:pillowfort or otag:punisher)",
    "combo": '(o:"infinite" or o:"you win the game" or o:"opponents lose the game")',
    "midrange": "t:creature mv>=3 mv<=5",
    "mill": '(o:"mill" o:"target player" or o:"target opponent mills")',
    "discard": '(o:"discard" o:"opponent")',
    "graveyard": '(otag:reanimate or o:"from your graveyard")',
    "tribal": '(o:"creature type" or o:"of the chosen type")',
    "typal": '(o:"creature type" or o:"of the chosen type")',
    "superfriends": "(t:planeswalker or o:proliferate)",
    "group hug": '(o:"each player draws" or o:"each player may")',
    "chaos": '(o:"coin" or o:"random" or o:"chaos")',
}
