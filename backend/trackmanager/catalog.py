"""Fixed vocabularies for track metadata: Camelot keys, genres, link platforms"""
from typing import Dict, List

BPM_MIN = 20
BPM_MAX = 999

# Camelot wheel code -> musical key
KEY_LABELS: Dict[str, str] = {
    "1A": "A Minor",
    "2A": "E Minor",
    "3A": "B Minor",
    "4A": "F# Minor",
    "5A": "C# Minor",
    "6A": "G# Minor",
    "7A": "D# Minor",
    "8A": "A# Minor",
    "9A": "F Minor",
    "10A": "C Minor",
    "11A": "G Minor",
    "12A": "D Minor",
    "1B": "C Major",
    "2B": "G Major",
    "3B": "D Major",
    "4B": "A Major",
    "5B": "E Major",
    "6B": "B Major",
    "7B": "F# Major",
    "8B": "C# Major",
    "9B": "G# Major",
    "10B": "D# Major",
    "11B": "A# Major",
    "12B": "F Major",
}

KEY_CODES: List[str] = list(KEY_LABELS)

GENRES: List[str] = [
    "House",
    "Tech House",
    "Deep House",
    "Progressive House",
    "Techno",
    "Melodic Techno",
    "Trance",
    "Progressive Trance",
    "Drum & Bass",
    "Dubstep",
    "Trap",
    "Hip Hop",
    "R&B",
    "Pop",
    "Ambient",
    "Downtempo",
    "Electronica",
    "Experimental",
    "Other",
]

LINK_PLATFORMS: List[str] = ["spotify", "soundcloud", "beatport", "youtube"]


def key_options() -> List[Dict[str, str]]:
    """Key codes with display labels, e.g. {'value': '8A', 'label': '8A - A# Minor'}"""
    return [{"value": code, "label": f"{code} - {name}"} for code, name in KEY_LABELS.items()]
