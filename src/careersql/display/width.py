"""
Display Width - Terminal column width of mixed-width text
"""

# Code point ranges rendered two columns wide
WIDE_RANGES = (
    (0x4E00, 0x9FFF),  # CJK unified ideographs
    (0x3040, 0x309F),  # Hiragana
    (0x30A0, 0x30FF),  # Katakana
    (0xFF00, 0xFF9F),  # Full-width forms
)


def char_width(char: str) -> int:
    """Column width of a single character (1 or 2)"""
    code = ord(char)
    for start, end in WIDE_RANGES:
        if start <= code <= end:
            return 2
    return 1


def display_width(text: str) -> int:
    """
    Calculate the rendered width of a string.

    Args:
        text: The string to measure.

    Returns:
        Number of terminal columns the string occupies.
    """
    return sum(char_width(char) for char in str(text))


def pad_to(text: str, target_width: int) -> str:
    """Pad text with spaces up to target_width columns. Never truncates."""
    text = str(text)
    return text + ' ' * max(0, target_width - display_width(text))
