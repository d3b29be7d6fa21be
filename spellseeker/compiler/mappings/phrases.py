"""
Stable whole-query translations answered before any compiler runs.

Keys are lowercased queries; values are (grammar query, explanation).
"""

PHRASE_TRANSLATIONS: dict[str, tuple[str, str]] = {
    "mana rocks": (
        't:artifact o:"add" (o:"{C}" or o:"{W}" or o:"{U}" or o:"{B}" or o:"{R}" '
        'or o:"{G}" or o:"any color" or o:"one mana")',
        "Artifacts that produce mana (mana rocks)",
    ),
    "board wipes": (
        "otag:board-wipe",
        "Cards that destroy or remove all creatures or permanents",
    ),
}
