import re
import unicodedata

def normalize(s: str) -> str:
    """
    Normalize a string for comparison by removing accents and standardizing case.

    Example:
        "Château Fort" -> "chateau fort"
    """
    decomposed = unicodedata.normalize("NFKD", s)
    no_accents = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return no_accents.casefold()

def slugify(s: str, fallback: str = "collection") -> str:
    """
    Turn a display name into a safe file name fragment.

    Example:
        "My Star Wars Sets!" -> "my-star-wars-sets"
    """
    slug = re.sub(r"[^a-z0-9]+", "-", normalize(s or "")).strip("-")
    return slug or fallback

def collapse_ws(s: str) -> str:
    return re.sub(r"\s+", " ", s or "").strip()
