"""
Sample catalog sources for testing
"""

# Czech subtitles, grouped with comments the way translators ship them
CS_SOURCE = """\
## Ambient

subtitle-campfire = Praskání ohně
subtitle-bees = Bzučení včel

# Wildlife
subtitle-wolf = Vytí vlka
utterance-wolf-angry = Vrčení rozzuřeného vlka
subtitle-silence =
"""

# English reference catalog; has every key callers use
EN_SOURCE = """\
## Ambient
subtitle-campfire = Campfire crackling
subtitle-bees = Bees buzzing

# Wildlife
subtitle-wolf = Wolf howling
subtitle-owl = Owl hooting
utterance-wolf-angry = Angry wolf growling
subtitle-silence =
"""

# Slovak catalog, deliberately sparse
SK_SOURCE = """\
subtitle-owl = Húkanie sovy
"""

MALFORMED_SOURCE = """\
subtitle-bees = Bzučení včel
this line has no separator
"""

DUPLICATE_SOURCE = """\
subtitle-owl = Houkání sovy

subtitle-owl = Sova
"""


def numbered_source(count: int, prefix: str = "subtitle-", skip: set[int] | None = None) -> str:
    """Build a catalog with ``count`` keys ``<prefix>0..count-1``, minus ``skip``."""
    skip = skip or set()
    return "\n".join(
        f"{prefix}{i} = Text {i}" for i in range(count) if i not in skip
    )
