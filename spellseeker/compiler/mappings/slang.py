"""
Exact slang phrases with a fixed grammar meaning.

These are community terms that name a card category directly (land
cycles, frame flags, card layouts). They resolve before any pattern
table and are matched longest phrase first.
"""

SLANG_PHRASES: dict[str, str] = {
    # Land cycles
    "fetch lands": "is:fetchland",
    "fetchlands": "is:fetchland",
    "fetches": "is:fetchland",
    "shock lands": "is:shockland",
    "shocklands": "is:shockland",
    "dual lands": "is:dual",
    "original duals": "is:dual",
    "check lands": "is:checkland",
    "checklands": "is:checkland",
    "fast lands": "is:fastland",
    "fastlands": "is:fastland",
    "pain lands": "otag:painland",
    "painlands": "otag:painland",
    "bounce lands": "otag:bounceland",
    "karoos": "otag:bounceland",
    "gain lands": "is:gainland",
    "scry lands": "is:scryland",
    "filter lands": "is:filterland",
    "man lands": "is:manland",
    "manlands": "is:manland",
    "creature lands": "is:manland",
    "triomes": "is:triland",
    "tri lands": "is:triland",
    "battle lands": "is:tangoland",
    "utility lands": "t:land -t:basic",
    # Card shapes and frames
    "vanilla creatures": "is:vanilla",
    "french vanilla": "is:frenchvanilla",
    "modal double faced cards": "is:mdfc",
    "mdfcs": "is:mdfc",
    "double faced cards": "is:dfc",
    "split cards": "is:split",
    "adventure cards": "is:adventure",
    "reserved list": "is:reserved",
    "full art lands": "is:fullart t:basic",
    "borderless": "border:borderless",
    # Commander
    "commanders": "is:commander",
    "legal commanders": "is:commander",
    "partner commanders": "is:commander kw:partner",
    "game changers": "is:gamechanger",
    # Mana rock shorthands
    "signets": 't:artifact name:signet o:"add"',
    "talismans": 't:artifact name:talisman o:"add"',
    # Spell shorthands
    "free spells": 'o:"without paying"',
    "free counterspells": 'otag:counter o:"rather than pay"',
    "one drops": "mv=1",
    "two drops": "mv=2",
    "three drops": "mv=3",
}
