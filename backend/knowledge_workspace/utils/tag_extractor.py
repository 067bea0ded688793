"""
Tag extraction utilities - Extract keywords, tags and a category from content.

Everything here is a pure function of its inputs: the same text always
yields the same ranking (frequency first, then first occurrence).
"""
from collections import Counter
from typing import Dict, Iterable, List, Optional
import re

# Common stop words to filter out
STOP_WORDS = frozenset({
    'the', 'a', 'an', 'and', 'or', 'but', 'in', 'on', 'at', 'to', 'for', 'of', 'with',
    'by', 'from', 'is', 'are', 'was', 'were', 'be', 'been', 'being', 'have', 'has', 'had',
    'do', 'does', 'did', 'will', 'would', 'could', 'should', 'may', 'might', 'can',
    'this', 'that', 'these', 'those'
})

# Tag suggestion also drops "must"
_TAG_STOP_WORDS = STOP_WORDS | {'must'}

DEFAULT_KEYWORDS = ['document', 'content', 'text', 'information']
DEFAULT_CATEGORY = 'General'

# Configuration constants
_MIN_KEYWORD_LENGTH = 4  # keywords must be longer than 3 characters
_MAX_KEYWORDS = 8
_MAX_TAGS = 5

CATEGORY_KEYWORDS: Dict[str, List[str]] = {
    'AI & ML': ['ai', 'artificial intelligence', 'machine learning', 'deep learning', 'neural network', 'model', 'algorithm'],
    'Web Development': ['web', 'html', 'css', 'javascript', 'react', 'vue', 'angular', 'frontend', 'backend', 'api'],
    'Database': ['database', 'sql', 'mongodb', 'postgresql', 'mysql', 'nosql', 'query', 'schema'],
    'DevOps': ['devops', 'docker', 'kubernetes', 'ci/cd', 'deployment', 'cloud', 'aws', 'azure'],
    'Programming': ['programming', 'code', 'function', 'class', 'variable', 'syntax', 'python', 'java', 'c++'],
    'Data Science': ['data', 'analytics', 'visualization', 'statistics', 'pandas', 'numpy', 'analysis'],
    'Security': ['security', 'encryption', 'authentication', 'authorization', 'vulnerability', 'penetration'],
    'Mobile Development': ['mobile', 'ios', 'android', 'react native', 'flutter', 'app development'],
}

_NON_ALNUM = re.compile(r'[^a-z0-9]')
_TAG_WORD = re.compile(r'\b[a-z]{3,}\b')


def _top(words: Iterable[str], limit: int) -> List[str]:
    # Counter keeps first-seen order for equal counts
    return [word for word, _ in Counter(words).most_common(limit)]


def extract_keywords(text: str, limit: int = _MAX_KEYWORDS) -> List[str]:
    """
    Extract the most frequent keywords of a text.
    
    Words are lower-cased and stripped of non-alphanumerics; stop words and
    words of three characters or fewer are dropped.
    
    Args:
        text: Text content to analyze
        limit: Maximum number of keywords
        
    Returns:
        Top keywords, or DEFAULT_KEYWORDS when nothing qualifies
    """
    words = (_NON_ALNUM.sub('', word) for word in text.lower().split())
    candidates = [w for w in words if len(w) >= _MIN_KEYWORD_LENGTH and w not in STOP_WORDS]
    keywords = _top(candidates, limit)
    return keywords or list(DEFAULT_KEYWORDS)


def suggest_tags(title: str, content: str, limit: int = _MAX_TAGS) -> List[str]:
    """
    Suggest tags for new content.
    
    Args:
        title: Content title
        content: Content body
        limit: Maximum number of tags
        
    Returns:
        Up to ``limit`` lower-case words of three or more letters, most frequent first
    """
    words = _TAG_WORD.findall(f"{title} {content}".lower())
    return _top((w for w in words if w not in _TAG_STOP_WORDS), limit)


def suggest_category(title: str, content: str, tags: Optional[Iterable[str]] = None) -> str:
    """
    Suggest a category by counting keyword substring hits.
    
    A category only wins with a strictly higher score than every category
    listed before it, so ties go to the earlier category and zero hits
    give DEFAULT_CATEGORY.
    
    Args:
        title: Content title
        content: Content body
        tags: Optional existing tags, included in the scored text
        
    Returns:
        One of the CATEGORY_KEYWORDS labels, or DEFAULT_CATEGORY
    """
    text = f"{title} {content} {' '.join(tags or [])}".lower()
    
    best_category = DEFAULT_CATEGORY
    best_score = 0
    for category, keywords in CATEGORY_KEYWORDS.items():
        score = sum(1 for keyword in keywords if keyword in text)
        if score > best_score:
            best_score = score
            best_category = category
    
    return best_category


def normalize_tags(tags: Optional[Iterable[str]]) -> List[str]:
    """Trim and lower-case tags, dropping blanks and duplicates (order kept)."""
    seen: Dict[str, None] = {}
    for tag in tags or []:
        tag = tag.strip().lower()
        if tag:
            seen.setdefault(tag, None)
    return list(seen)
