"""
Keyword Rules - Declarative keyword tables for heuristic categorization

NO AI CALLS - Pure rule-based logic, used when the model gives nothing usable:
- KEYWORD_TABLE: category family → keywords, scored by frequency
- CO_OCCURRENCE_RULES: signal pairs that force two categories together
- is_meaningful(): gibberish/spam heuristic for the "Other" bucket

Table order matters: keyword score ties go to the family declared first.
"""
import re
from typing import Dict, List, Optional, Tuple

# === KEYWORD SCORING (family → keywords) ===
# Keywords match at the start of a word, so "design" also counts "designer".
KEYWORD_TABLE: Dict[str, Tuple[str, ...]] = {
    "Design": (
        "design", "interior", "aesthetic", "visual", "graphic", "layout",
        "decor", "furniture", "color palette", "typography", "render",
    ),
    "Business": (
        "business", "freelance", "startup", "company", "budget", "entrepreneur",
        "marketing", "client", "profit", "revenue", "invest", "management",
        "consulting",
    ),
    "Career": (
        "career", "promotion", "resume", "interview", "mentor", "professional development",
        "salary", "networking", "skills",
    ),
    "Construction": (
        "construction", "building", "engineering", "contractor", "concrete",
        "site", "structural", "renovation", "architect", "cement", "scaffold",
    ),
    "Academic": (
        "academic", "university", "degree", "student", "research", "thesis",
        "study", "studies", "exam", "lecture", "course",
    ),
    "Informative": (
        "guide", "tutorial", "how to", "tips", "information", "explain",
        "overview", "introduction", "announcement", "news",
    ),
    "Jobs": (
        "job", "hiring", "vacancy", "vacancies", "position", "recruit",
        "apply", "opening", "internship",
    ),
}

# === MULTI-CATEGORY FORCING ===
# Signals are plain substring checks on the lowercased text.
SIGNALS: Dict[str, Tuple[str, ...]] = {
    "construction": ("construction", "building", "engineering"),
    "business": ("business", "company", "budgeting", "management"),
    "career": ("career", "job", "freelance", "consultant"),
    "design": ("design", "interior", "architecture"),
    "academic": ("degree", "student", "university", "study"),
}

# (signal_a, signal_b) → (category_a, category_b)
CO_OCCURRENCE_RULES: List[Tuple[Tuple[str, str], Tuple[str, str]]] = [
    (("construction", "business"), ("Construction", "Business")),
    (("career", "academic"), ("Career", "Academic")),
    (("career", "business"), ("Career", "Business")),
    (("design", "construction"), ("Design", "Construction")),
]

# === MEANINGFULNESS HEURISTIC ===
MIN_MEANINGFUL_LENGTH = 10
MAX_ALPHA_RUN = 25
FILLER_WORDS = frozenset({
    "random", "test", "testing", "asdf", "qwerty", "lorem", "ipsum",
    "blah", "xyz", "abc", "foo", "bar", "aaa", "zzz",
})

_LATIN = re.compile(r"[a-z]")
_VOWELS = re.compile(r"[aeiouy]")
_LETTERS = re.compile(r"[^\W\d_]")
_ALPHA_RUN = re.compile(r"[a-z]{%d,}" % MAX_ALPHA_RUN)
_MIXED_TOKEN = re.compile(r"^(?=.*[a-z])(?=.*\d)[a-z\d]+$")
_TOKEN = re.compile(r"[a-z\d]+")


def _keyword_pattern(keyword: str) -> re.Pattern:
    return re.compile(r"\b" + re.escape(keyword))


_COMPILED_KEYWORDS = {
    family: tuple(_keyword_pattern(kw) for kw in keywords)
    for family, keywords in KEYWORD_TABLE.items()
}


def score_keywords(text: str) -> Dict[str, int]:
    """
    Count keyword occurrences per family in lowercased text.

    Returns every family in table order, including zero scores.
    """
    lowered = text.lower()
    return {
        family: sum(len(pattern.findall(lowered)) for pattern in patterns)
        for family, patterns in _COMPILED_KEYWORDS.items()
    }


def best_keyword_family(text: str, allowed_families: Optional[List[str]] = None) -> Optional[str]:
    """
    Highest-scoring family with a nonzero score.

    Only families in `allowed_families` compete (all when None). Ties go to the
    family declared first in KEYWORD_TABLE.
    """
    best, best_score = None, 0
    for family, score in score_keywords(text).items():
        if allowed_families is not None and family not in allowed_families:
            continue
        if score > best_score:
            best, best_score = family, score
    return best


def detect_signals(text: str) -> Dict[str, bool]:
    lowered = text.lower()
    return {
        signal: any(word in lowered for word in words)
        for signal, words in SIGNALS.items()
    }


def forced_category_pairs(text: str) -> List[Tuple[str, str]]:
    """Category pairs whose signals both appear in the text, in rule order"""
    signals = detect_signals(text)
    return [
        categories
        for (signal_a, signal_b), categories in CO_OCCURRENCE_RULES
        if signals[signal_a] and signals[signal_b]
    ]


def is_meaningful(text: str) -> bool:
    """
    Heuristic gibberish/spam check.

    Not meaningful when the text is very short, has no letters (symbols/digits
    only), has no vowels, contains a long unbroken alphabetic run, or is at
    least half filler tokens (placeholder words or letter-digit mixes like
    "abc123").
    """
    lowered = text.lower().strip()
    compact = re.sub(r"\s+", "", lowered)

    if len(compact) < MIN_MEANINGFUL_LENGTH:
        return False
    if not _LETTERS.search(lowered):
        return False
    # Vowel and run checks only make sense for Latin script
    if _LATIN.search(lowered) and not _VOWELS.search(lowered):
        return False
    if _ALPHA_RUN.search(lowered):
        return False

    tokens = _TOKEN.findall(lowered)
    if tokens:
        filler = sum(1 for t in tokens if t in FILLER_WORDS or _MIXED_TOKEN.match(t))
        if filler * 2 >= len(tokens):
            return False

    return True
