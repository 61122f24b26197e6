import inflect
from unidecode import unidecode

inflect_e = inflect.engine()


def text_name(name: str) -> str:
    """Return the name in `Text case` (`created_at` becomes `Created at`)."""
    parts = [p for p in name.replace("-", "_").split("_") if p]
    if not parts:
        return name
    parts[0] = parts[0][0].upper() + parts[0][1:]
    return " ".join(parts)


def count_label(count: int, noun: str) -> str:
    """Return a label like `1 row` or `3 rows`."""
    return f"{count} {inflect_e.plural(noun, count)}"  # type: ignore


def fold_text(text: str) -> str:
    """Lower-case the text and replace accented letters with ASCII ones."""
    return unidecode(text).lower()


def contains_text(haystack: str, needle: str, fold_accents: bool) -> bool:
    """Case-insensitive substring test.

    Args:
        haystack: The text to search in.
        needle: The text to search for. It is expected to be lower case
            already.
        fold_accents: Also try matching the ASCII form of both strings.

    Returns:
        True if the needle is found.
    """
    if needle in haystack.lower():
        return True
    if fold_accents:
        return fold_text(needle) in fold_text(haystack)
    return False
