"""
Keyword ability mappings.

Standard abilities map to the ``kw:`` key, which is more accurate than
searching oracle text for the keyword's name.
"""

KEYWORD_ABILITIES: dict[str, str] = {
    "first strike": "kw:first-strike",
    "double strike": "kw:double-strike",
    "living weapon": "kw:living-weapon",
    "totem armor": "kw:totem-armor",
    "haste": "kw:haste",
    "flying": "kw:flying",
    "trample": "kw:trample",
    "deathtouch": "kw:deathtouch",
    "lifelink": "kw:lifelink",
    "vigilance": "kw:vigilance",
    "menace": "kw:menace",
    "reach": "kw:reach",
    "hexproof": "kw:hexproof",
    "indestructible": "kw:indestructible",
    "flash": "kw:flash",
    "defender": "kw:defender",
    "infect": "kw:infect",
    "flashback": "kw:flashback",
    "buyback": "kw:buyback",
    "kicker": "kw:kicker",
    "prowess": "kw:prowess",
    "ward": "kw:ward",
    "shroud": "kw:shroud",
    "fear": "kw:fear",
    "intimidate": "kw:intimidate",
    "skulk": "kw:skulk",
    "shadow": "kw:shadow",
    "horsemanship": "kw:horsemanship",
    "protection": "kw:protection",
    "cascade": "kw:cascade",
    "convoke": "kw:convoke",
    "delve": "kw:delve",
    "dredge": "kw:dredge",
    "emerge": "kw:emerge",
    "evoke": "kw:evoke",
    "exploit": "kw:exploit",
    "extort": "kw:extort",
    "madness": "kw:madness",
    "miracle": "kw:miracle",
    "modular": "kw:modular",
    "morph": "kw:morph",
    "mutate": "kw:mutate",
    "ninjutsu": "kw:ninjutsu",
    "outlast": "kw:outlast",
    "persist": "kw:persist",
    "phasing": "kw:phasing",
    "rebound": "kw:rebound",
    "replicate": "kw:replicate",
    "retrace": "kw:retrace",
    "scavenge": "kw:scavenge",
    "storm": "kw:storm",
    "sunburst": "kw:sunburst",
    "suspend": "kw:suspend",
    "transmute": "kw:transmute",
    "undying": "kw:undying",
    "unearth": "kw:unearth",
    "wither": "kw:wither",
    "provoke": "kw:provoke",
    "myriad": "kw:myriad",
    "encore": "kw:encore",
    "blitz": "kw:blitz",
    "connive": "kw:connive",
    "offspring": "kw:offspring",
    "backup": "kw:backup",
    "partner": "kw:partner",
    "proliferate": "kw:proliferate",
    "populate": "kw:populate",
    "landwalk": "kw:landwalk",
}

# Abilities the kw: key does not cover
SPECIAL_KEYWORDS: dict[str, str] = {
    "unblockable": 'o:"can\'t be blocked"',
    "evasion": "(kw:flying or kw:menace or kw:skulk or kw:shadow or kw:fear or kw:intimidate)",
    "affinity": 'o:"affinity for"',
    "annihilator": "kw:annihilator",
}
