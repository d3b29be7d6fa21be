from spellseeker.db.database import get_session, init_db
from spellseeker.db.operations import (
    add_translation_rule,
    cached_translation_to_result,
    deactivate_translation_rule,
    get_active_rules,
    get_cached_translation,
    hash_cache_key,
    purge_expired_translations,
    store_cached_translation,
)

__all__ = [
    "add_translation_rule",
    "cached_translation_to_result",
    "deactivate_translation_rule",
    "get_active_rules",
    "get_cached_translation",
    "get_session",
    "hash_cache_key",
    "init_db",
    "purge_expired_translations",
    "store_cached_translation",
]
