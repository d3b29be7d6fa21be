"""
Grammar validator for card-search queries.

Sanitizes a candidate grammar query against the known vocabulary before
it is executed. Malformed syntax is repaired, unknown keys and tags are
dropped, and every change is recorded as an issue string.

INVARIANTS:
- validate_query() never raises and always returns an executable query
- Validating a sanitized query again yields the same text and no issues
- Unknown keys and oracle tags are never passed through silently
- Spaces inside double quotes and /regex/ literals never split tokens
"""

import logging
import re

from spellseeker.config import MAX_QUERY_LENGTH
from spellseeker.grammar.vocabulary import (
    KNOWN_OTAGS,
    OTAG_ALIASES,
    SET_KEYS,
    VALID_SEARCH_KEYS,
)
from spellseeker.models.query import ValidationResult

logger = logging.getLogger(__name__)

# =============================================================================
# ISSUE MESSAGES
# =============================================================================

ISSUE_UNSAFE_CHARACTERS = "Removed unsupported characters"
ISSUE_PT_MATH = "Removed unsupported power+toughness math"
ISSUE_MISSING_QUOTE = "Added missing closing quote"
ISSUE_MISSING_SLASH = "Added missing closing slash to regex"
ISSUE_UNBALANCED_PARENS = "Removed unbalanced parentheses"
ISSUE_DANGLING_OR = "Removed dangling OR connective"
ISSUE_EMPTY_GROUP = "Removed empty parentheses"
ISSUE_OR_GROUPS = "Normalized OR groups with parentheses"
ISSUE_YEAR_AS_SET = "Replaced invalid year set syntax with year=YYYY"
ISSUE_TAG_ALIAS = "Rewrote oracle tag alias to otag:"
ISSUE_TRUNCATED = f"Query truncated to {MAX_QUERY_LENGTH} characters"

# =============================================================================
# PATTERNS
# =============================================================================

_WHITESPACE = re.compile(r"\s+")

# Characters outside this set are never meaningful to the backend grammar
_UNSAFE_CHARACTERS = re.compile(r"""[^\w\s:="'()<>!+\-/*\\{}.,^$|?\[\]]""")

_PT_MATH = re.compile(
    r"-?\b(?:pow|power|tou|toughness)\s*\+\s*(?:pow|power|tou|toughness)\s*"
    r"(?:<=|>=|!=|=|<|>|:)\s*\d+",
    re.IGNORECASE,
)

# key, operator, value; a leading "-" negates the token
_KEY_TOKEN = re.compile(r"^(-?)(\w+)(<=|>=|!=|:|=|<|>)(.*)$", re.DOTALL)

_FOUR_DIGIT_YEAR = re.compile(r"^\d{4}$")

# Scanner states
_PLAIN = "plain"
_QUOTE = "quote"
_REGEX = "regex"

# A "/" right after one of these opens a regex literal value
_REGEX_OPENERS = frozenset({":", "="})


# =============================================================================
# SCANNING AND TOKENIZING
# =============================================================================


def _scan(text: str) -> list[tuple[str, str]]:
    """Label every character of ``text`` as plain, quoted, or regex."""
    return _scan_state(text)[0]


def _scan_state(text: str) -> tuple[list[tuple[str, str]], str, bool]:
    """Scan ``text``; also return the state at the end and whether it ends escaped."""
    labeled: list[tuple[str, str]] = []
    state = _PLAIN
    previous = ""
    escaped = False

    for char in text:
        if state == _QUOTE:
            labeled.append((char, _QUOTE))
            if char == '"':
                state = _PLAIN
        elif state == _REGEX:
            labeled.append((char, _REGEX))
            if char == "/" and not escaped:
                state = _PLAIN
            escaped = char == "\\" and not escaped
        elif char == '"':
            labeled.append((char, _QUOTE))
            state = _QUOTE
        elif char == "/" and previous in _REGEX_OPENERS:
            labeled.append((char, _REGEX))
            state = _REGEX
            escaped = False
        else:
            labeled.append((char, _PLAIN))
        previous = char

    return labeled, state, escaped


def tokenize(query: str) -> list[str]:
    """
    Split a grammar query into top-level tokens.

    A parenthesized group is a single token; spaces inside quotes, regex
    literals and parentheses do not separate tokens.
    """
    tokens: list[str] = []
    current: list[str] = []
    depth = 0

    for char, state in _scan(query):
        if state == _PLAIN:
            if char == "(":
                depth += 1
            elif char == ")":
                depth = max(depth - 1, 0)
            elif char.isspace() and depth == 0:
                if current:
                    tokens.append("".join(current))
                    current = []
                continue
        current.append(char)

    if current:
        tokens.append("".join(current))
    return tokens


def _split_group(token: str) -> tuple[str, str] | None:
    """Return (negation prefix, inner text) if ``token`` is one parenthesized group."""
    prefix = "-" if token.startswith("-(") else ""
    body = token[len(prefix) :]
    if not body.startswith("(") or not body.endswith(")"):
        return None

    depth = 0
    for index, (char, state) in enumerate(_scan(body)):
        if state != _PLAIN:
            continue
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0 and index != len(body) - 1:
                return None
    return prefix, body[1:-1].strip()


def _is_or(token: str) -> bool:
    return token.upper() == "OR"


def _collapse(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


# =============================================================================
# ISSUE COLLECTION
# =============================================================================


class _IssueLog:
    """Ordered, de-duplicated issue messages plus unknown vocabulary found."""

    def __init__(self) -> None:
        self.messages: list[str] = []
        self.unknown_keys: list[str] = []
        self.unknown_tags: list[str] = []

    def add(self, message: str) -> None:
        if message not in self.messages:
            self.messages.append(message)

    def unknown_key(self, key: str) -> None:
        if key not in self.unknown_keys:
            self.unknown_keys.append(key)

    def unknown_tag(self, tag: str) -> None:
        if tag not in self.unknown_tags:
            self.unknown_tags.append(tag)

    def render(self, truncated: bool) -> tuple[str, ...]:
        issues = list(self.messages)
        if self.unknown_keys:
            issues.append(f"Unknown search key(s): {', '.join(self.unknown_keys)}")
        if self.unknown_tags:
            issues.append(f"Unknown oracle tag(s): {', '.join(self.unknown_tags)}")
        if truncated:
            issues.append(ISSUE_TRUNCATED)
        return tuple(issues)


# =============================================================================
# STRING-LEVEL REPAIRS
# =============================================================================


def _close_literals(query: str, issues: _IssueLog) -> str:
    """Close a quote or /regex/ literal left open at the end of the query."""
    _, state, escaped = _scan_state(query)
    if state == _QUOTE:
        issues.add(ISSUE_MISSING_QUOTE)
        return query + '"'
    if state == _REGEX:
        issues.add(ISSUE_MISSING_SLASH)
        # A trailing backslash would escape the closing slash
        return query + ("\\/" if escaped else "/")
    return query


def _balance_parentheses(query: str, issues: _IssueLog) -> str:
    """Strip every structural parenthesis when they do not pair up."""
    depth = 0
    balanced = True
    for char, state in _scan(query):
        if state != _PLAIN:
            continue
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth < 0:
                balanced = False
                break
    if balanced and depth == 0:
        return query

    issues.add(ISSUE_UNBALANCED_PARENS)
    kept = [char for char, state in _scan(query) if state != _PLAIN or char not in "()"]
    return _collapse("".join(kept))


# =============================================================================
# TOKEN-LEVEL REPAIRS
# =============================================================================


def _drop_dangling_or(tokens: list[str]) -> tuple[list[str], bool]:
    """Remove OR connectives that do not sit between two operands."""
    cleaned: list[str] = []
    changed = False
    for token in tokens:
        if _is_or(token) and (not cleaned or _is_or(cleaned[-1])):
            changed = True
            continue
        cleaned.append(token)
    while cleaned and _is_or(cleaned[-1]):
        cleaned.pop()
        changed = True
    return cleaned, changed


def _fold_or_groups(tokens: list[str]) -> tuple[list[str], bool]:
    """Merge every ``a OR b [OR c ...]`` run into one parenthesized group."""
    folded: list[str] = []
    changed = False
    index = 0
    while index < len(tokens):
        run = [tokens[index]]
        while index + 2 < len(tokens) and _is_or(tokens[index + 1]):
            run.extend(tokens[index + 1 : index + 3])
            index += 2
        if len(run) > 1:
            folded.append(f"({' '.join(run)})")
            changed = True
        else:
            folded.append(run[0])
        index += 1
    return folded, changed


def _repair_token(token: str, issues: _IssueLog) -> str | None:
    """Repair or drop a single non-group token. Returns None to drop it."""
    match = _KEY_TOKEN.match(token)
    if match is None:
        return token

    negation, key, operator, value = match.groups()
    lowered = key.lower()

    if lowered in SET_KEYS and _FOUR_DIGIT_YEAR.match(value):
        issues.add(ISSUE_YEAR_AS_SET)
        return f"{negation}year={value}"

    if lowered in OTAG_ALIASES:
        issues.add(ISSUE_TAG_ALIAS)
        key = lowered = "otag"
        token = f"{negation}otag{operator}{value}"

    if lowered not in VALID_SEARCH_KEYS:
        issues.unknown_key(key)
        return None

    if lowered == "otag":
        tag = value.strip('"').lower()
        if tag not in KNOWN_OTAGS:
            issues.unknown_tag(tag or '""')
            return None

    return token


def _repair_group(prefix: str, inner: str, issues: _IssueLog) -> str | None:
    members = tokenize(inner)
    repaired = _repair_sequence(members, issues, top_level=False)
    if not repaired:
        if not members:
            issues.add(ISSUE_EMPTY_GROUP)
        return None
    if len(repaired) == 1 and len(repaired) < len(members) and not prefix:
        return repaired[0]
    return f"{prefix}({' '.join(repaired)})"


def _repair_sequence(tokens: list[str], issues: _IssueLog, top_level: bool) -> list[str]:
    tokens, changed = _drop_dangling_or(tokens)
    if changed:
        issues.add(ISSUE_DANGLING_OR)

    if top_level:
        tokens, changed = _fold_or_groups(tokens)
        if changed:
            issues.add(ISSUE_OR_GROUPS)

    repaired: list[str] = []
    for token in tokens:
        if _is_or(token):
            repaired.append(token)
            continue
        group = _split_group(token)
        if group is not None:
            result = _repair_group(group[0], group[1], issues)
        else:
            result = _repair_token(token, issues)
        if result is not None:
            repaired.append(result)

    # Removals above can strand an OR; the removal itself is already recorded
    repaired, _ = _drop_dangling_or(repaired)
    return repaired


def _truncate(tokens: list[str]) -> tuple[list[str], bool]:
    """Drop trailing tokens until the joined query fits the backend limit."""
    truncated = False
    while tokens and len(" ".join(tokens)) > MAX_QUERY_LENGTH:
        tokens = tokens[:-1]
        truncated = True
    return tokens, truncated


# =============================================================================
# PUBLIC API
# =============================================================================


def validate_query(query: str) -> ValidationResult:
    """
    Validate and sanitize a grammar query.

    Args:
        query: Candidate grammar query (translator output or user edit)

    Returns:
        ValidationResult whose ``sanitized`` text is always executable.
        ``valid`` is True only when no repair was needed.
    """
    issues = _IssueLog()
    text = _collapse(query)

    stripped = _UNSAFE_CHARACTERS.sub("", text)
    if stripped != text:
        issues.add(ISSUE_UNSAFE_CHARACTERS)
        text = _collapse(stripped)

    without_math = _PT_MATH.sub(" ", text)
    if without_math != text:
        issues.add(ISSUE_PT_MATH)
        text = _collapse(without_math)

    text = _close_literals(text, issues)
    text = _balance_parentheses(text, issues)

    tokens = _repair_sequence(tokenize(text), issues, top_level=True)
    tokens, truncated = _truncate(tokens)

    sanitized = _collapse(" ".join(tokens))
    rendered = issues.render(truncated)

    if rendered:
        logger.debug(
            "QUERY_SANITIZED",
            extra={"issue_count": len(rendered), "changed": sanitized != _collapse(query)},
        )

    return ValidationResult(valid=not rendered, sanitized=sanitized, issues=rendered)
