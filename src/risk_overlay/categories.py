"""Substance classification - free-text names to pharmacological categories.

The mapping is heuristic. Lookups run in three stages:
  1. alias table (brand names, slang, spelling variants) → canonical key
  2. canonical key → category table
  3. substring fragments on the canonical key as a fallback

Anything that falls through all three resolves to ``unknown``.
"""

from __future__ import annotations

import re
from typing import Any

from risk_overlay.models import SubstanceCategory


_ALIASES: dict[str, str] = {
    # Stimulants
    "a-pvp": "a-pvp",
    "alpha-pvp": "a-pvp",
    "alpha pvp": "a-pvp",
    "α-pvp": "a-pvp",
    "flakka": "a-pvp",
    "nep": "n-ethylpentedrone",
    "n-ethylpentedrone": "n-ethylpentedrone",
    "3-fa": "3-fluoroamphetamine",
    "3-fluoroamphetamine": "3-fluoroamphetamine",
    "3-fma": "3-fluoromethamphetamine",
    "3-fluoromethamphetamine": "3-fluoromethamphetamine",
    "amphetamine": "amphetamine",
    "speed": "amphetamine",
    "adderall": "amphetamine",
    "methamphetamine": "methamphetamine",
    "meth": "methamphetamine",
    "crystal": "methamphetamine",
    "crystal meth": "methamphetamine",
    "mdma": "mdma",
    "ecstasy": "mdma",
    "molly": "mdma",
    "xtc": "mdma",
    "cocaine": "cocaine",
    "coke": "cocaine",
    "crack": "cocaine",
    "kokain": "cocaine",
    "methylphenidate": "methylphenidate",
    "ritalin": "methylphenidate",
    "concerta": "methylphenidate",
    "mephedrone": "mephedrone",
    "4-mmc": "mephedrone",
    # Opioids
    "2-map-237": "2-map-237",
    "2map": "2-map-237",
    "2-methyl-ap-237": "2-map-237",
    "2 methyl ap 237": "2-map-237",
    "2map237": "2-map-237",
    "kratom": "kratom",
    "mitragynine": "kratom",
    "7-hydroxymitragynine": "kratom",
    "o-dsmt": "o-dsmt",
    "o-desmethyltramadol": "o-dsmt",
    "tramadol": "tramadol",
    "morphine": "morphine",
    "morphin": "morphine",
    "codeine": "codeine",
    "codein": "codeine",
    "heroin": "heroin",
    "dope": "heroin",
    "fentanyl": "fentanyl",
    "oxycodone": "oxycodone",
    "oxycontin": "oxycodone",
    "hydrocodone": "hydrocodone",
    "methadone": "methadone",
    "buprenorphine": "buprenorphine",
    "subutex": "buprenorphine",
    # GABAergic
    "phenibut": "phenibut",
    "gabapentin": "gabapentin",
    "neurontin": "gabapentin",
    "pregabalin": "pregabalin",
    "lyrica": "pregabalin",
    "diazepam": "diazepam",
    "valium": "diazepam",
    "alprazolam": "alprazolam",
    "xanax": "alprazolam",
    "xanny": "alprazolam",
    "clonazepam": "clonazepam",
    "klonopin": "clonazepam",
    "rivotril": "clonazepam",
    "lorazepam": "lorazepam",
    "ativan": "lorazepam",
    "tavor": "lorazepam",
    "etizolam": "etizolam",
    "flualprazolam": "flualprazolam",
    "bromazolam": "bromazolam",
    "zolpidem": "zolpidem",
    "ambien": "zolpidem",
    "ghb": "ghb",
    "gbl": "ghb",
    "alcohol": "alcohol",
    "alkohol": "alcohol",
    "ethanol": "alcohol",
    "beer": "alcohol",
    "wine": "alcohol",
    # Psychedelics
    "psilocybin": "psilocybin",
    "psilocin": "psilocybin",
    "mushrooms": "psilocybin",
    "shrooms": "psilocybin",
    "lsd": "lsd",
    "acid": "lsd",
    "1p-lsd": "1p-lsd",
    "1v-lsd": "1v-lsd",
    "dmt": "dmt",
    "ayahuasca": "dmt",
    "mescaline": "mescaline",
    "mescalin": "mescaline",
    "2c-b": "2c-b",
    # Dissociatives
    "ketamine": "ketamine",
    "ketamin": "ketamine",
    "special k": "ketamine",
    "dxm": "dxm",
    "dextromethorphan": "dxm",
    "pcp": "pcp",
    "mxe": "mxe",
    "methoxetamine": "mxe",
    "3-meo-pcp": "3-meo-pcp",
    "nitrous": "nitrous oxide",
    "nitrous oxide": "nitrous oxide",
    "n2o": "nitrous oxide",
    # Cannabis
    "thc": "thc",
    "cannabis": "thc",
    "marijuana": "thc",
    "marihuana": "thc",
    "weed": "thc",
    "hash": "thc",
    "hashish": "thc",
    "gras": "thc",
    # Nicotine
    "nicotine": "nicotine",
    "nikotin": "nicotine",
    "tobacco": "nicotine",
    "tabak": "nicotine",
    "cigarette": "nicotine",
    "snus": "nicotine",
}

_CATEGORIES: dict[str, SubstanceCategory] = {
    # Stimulants
    "a-pvp": SubstanceCategory.STIMULANT,
    "n-ethylpentedrone": SubstanceCategory.STIMULANT,
    "3-fluoroamphetamine": SubstanceCategory.STIMULANT,
    "3-fluoromethamphetamine": SubstanceCategory.STIMULANT,
    "amphetamine": SubstanceCategory.STIMULANT,
    "methamphetamine": SubstanceCategory.STIMULANT,
    "mdma": SubstanceCategory.STIMULANT,
    "cocaine": SubstanceCategory.STIMULANT,
    "methylphenidate": SubstanceCategory.STIMULANT,
    "mephedrone": SubstanceCategory.STIMULANT,
    # Opioids
    "2-map-237": SubstanceCategory.OPIOID,
    "kratom": SubstanceCategory.OPIOID,
    "o-dsmt": SubstanceCategory.OPIOID,
    "tramadol": SubstanceCategory.OPIOID,
    "morphine": SubstanceCategory.OPIOID,
    "codeine": SubstanceCategory.OPIOID,
    "heroin": SubstanceCategory.OPIOID,
    "fentanyl": SubstanceCategory.OPIOID,
    "oxycodone": SubstanceCategory.OPIOID,
    "hydrocodone": SubstanceCategory.OPIOID,
    "methadone": SubstanceCategory.OPIOID,
    "buprenorphine": SubstanceCategory.OPIOID,
    # GABAergic
    "phenibut": SubstanceCategory.GABAERGIC,
    "gabapentin": SubstanceCategory.GABAERGIC,
    "pregabalin": SubstanceCategory.GABAERGIC,
    "diazepam": SubstanceCategory.GABAERGIC,
    "alprazolam": SubstanceCategory.GABAERGIC,
    "clonazepam": SubstanceCategory.GABAERGIC,
    "lorazepam": SubstanceCategory.GABAERGIC,
    "etizolam": SubstanceCategory.GABAERGIC,
    "flualprazolam": SubstanceCategory.GABAERGIC,
    "bromazolam": SubstanceCategory.GABAERGIC,
    "zolpidem": SubstanceCategory.GABAERGIC,
    "ghb": SubstanceCategory.GABAERGIC,
    "alcohol": SubstanceCategory.GABAERGIC,
    # Psychedelics
    "psilocybin": SubstanceCategory.PSYCHEDELIC,
    "lsd": SubstanceCategory.PSYCHEDELIC,
    "1p-lsd": SubstanceCategory.PSYCHEDELIC,
    "1v-lsd": SubstanceCategory.PSYCHEDELIC,
    "dmt": SubstanceCategory.PSYCHEDELIC,
    "mescaline": SubstanceCategory.PSYCHEDELIC,
    "2c-b": SubstanceCategory.PSYCHEDELIC,
    # Dissociatives
    "ketamine": SubstanceCategory.DISSOCIATIVE,
    "dxm": SubstanceCategory.DISSOCIATIVE,
    "pcp": SubstanceCategory.DISSOCIATIVE,
    "mxe": SubstanceCategory.DISSOCIATIVE,
    "3-meo-pcp": SubstanceCategory.DISSOCIATIVE,
    "nitrous oxide": SubstanceCategory.DISSOCIATIVE,
    # Cannabis
    "thc": SubstanceCategory.CANNABIS,
    # Nicotine
    "nicotine": SubstanceCategory.NICOTINE,
}

# Checked in order; first matching fragment wins.
_FRAGMENTS: tuple[tuple[str, SubstanceCategory], ...] = (
    ("amphetamine", SubstanceCategory.STIMULANT),
    ("cathinone", SubstanceCategory.STIMULANT),
    ("benzo", SubstanceCategory.GABAERGIC),
    ("zolam", SubstanceCategory.GABAERGIC),
    ("zepam", SubstanceCategory.GABAERGIC),
    ("fentanyl", SubstanceCategory.OPIOID),
    ("morphine", SubstanceCategory.OPIOID),
    ("opioid", SubstanceCategory.OPIOID),
)

_LABELS: dict[SubstanceCategory, str] = {
    SubstanceCategory.STIMULANT: "Stimulants",
    SubstanceCategory.OPIOID: "Opioids",
    SubstanceCategory.GABAERGIC: "GABAergic depressants",
    SubstanceCategory.PSYCHEDELIC: "Psychedelics",
    SubstanceCategory.DISSOCIATIVE: "Dissociatives",
    SubstanceCategory.CANNABIS: "Cannabis",
    SubstanceCategory.NICOTINE: "Nicotine",
    SubstanceCategory.UNKNOWN: "Unknown",
}

_WHITESPACE = re.compile(r"\s+")


def normalize_substance(raw: Any) -> str:
    """Return the canonical key for a substance name.

    Unknown names come back normalized but otherwise unchanged.
    """
    if not isinstance(raw, str):
        return ""
    key = _WHITESPACE.sub(" ", raw.strip().lower())
    return _ALIASES.get(key, key)


def classify(raw: Any) -> SubstanceCategory:
    """Classify a free-text substance name. Never raises."""
    canonical = normalize_substance(raw)
    if not canonical:
        return SubstanceCategory.UNKNOWN

    category = _CATEGORIES.get(canonical)
    if category is not None:
        return category

    for fragment, fallback in _FRAGMENTS:
        if fragment in canonical:
            return fallback

    return SubstanceCategory.UNKNOWN


def category_label(category: SubstanceCategory) -> str:
    return _LABELS[category]


def known_substances() -> list[str]:
    """Canonical keys with an explicit category, sorted."""
    return sorted(_CATEGORIES)
