"""
Ingredient text extraction from raw OCR output.
"""

import re

INGREDIENT_MARKERS = re.compile(r"(ingredients|ingrédients|composition)\s*:", re.IGNORECASE)

# Headers that usually start the section after the ingredient list
SECTION_END_MARKERS = re.compile(
    r"\n\s*(nutrition facts|nutrition information|allergens?|contains|may contain|"
    r"storage|best before|net w(?:eigh)?t)\b",
    re.IGNORECASE
)


def extract_ingredient_section(raw_text: str) -> str:
    """
    Pull the ingredient list out of label text.

    Takes the text after the first "Ingredients:" header up to the next known
    section, or the whole text when there is no header. Line breaks become
    commas and the result ends without a trailing period.
    """
    if not raw_text:
        return ""

    text = raw_text
    marker = INGREDIENT_MARKERS.search(text)
    if marker:
        text = text[marker.end():]

    end = SECTION_END_MARKERS.search(text)
    if end:
        text = text[:end.start()]

    parts = [part.strip() for part in re.split(r"[\r\n]+", text)]
    flattened = ", ".join(part for part in parts if part)
    flattened = re.sub(r"\s*,\s*(,\s*)+", ", ", flattened)

    return flattened.strip(" ,.")
