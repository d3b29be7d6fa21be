from spellseeker.compiler.consistency import MappingTagDrift, check_mapping_tags
from spellseeker.compiler.deterministic import (
    DeterministicTranslation,
    compile_deterministic,
    normalize_input,
)
from spellseeker.compiler.fallback import compile_fallback
from spellseeker.compiler.semantic import (
    ConceptMatch,
    MappingResolution,
    MappingTable,
    RenderedConcepts,
    SemanticMappingEngine,
    default_engine,
)
from spellseeker.compiler.slots import ExtractedSlots, extract_slots

__all__ = [
    "ConceptMatch",
    "DeterministicTranslation",
    "ExtractedSlots",
    "MappingResolution",
    "MappingTable",
    "MappingTagDrift",
    "RenderedConcepts",
    "SemanticMappingEngine",
    "check_mapping_tags",
    "compile_deterministic",
    "compile_fallback",
    "default_engine",
    "extract_slots",
    "normalize_input",
]
