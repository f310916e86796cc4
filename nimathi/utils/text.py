"""Text helpers shared by journaling and points calculation"""


def count_words(content: str) -> int:
    """Count whitespace-separated words; blank content counts as zero"""
    if not content or not content.strip():
        return 0
    return len(content.split())
