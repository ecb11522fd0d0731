"""
Mood catalogue

Every journal entry carries one of these moods. The score feeds the analytics
(1 = worst, 10 = best) and `pixabay_query` is the image-search text stored
with the entry.
"""
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Mood:
    id: str
    label: str
    emoji: str
    score: int
    color: str
    prompt: str
    pixabay_query: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


MOODS: Dict[str, Mood] = {
    "HAPPY": Mood(
        id="happy", label="Happy", emoji="😊", score=8, color="amber",
        prompt="What's making you smile today?",
        pixabay_query="happy joy celebration",
    ),
    "EXCITED": Mood(
        id="excited", label="Excited", emoji="🤩", score=9, color="yellow",
        prompt="What are you looking forward to?",
        pixabay_query="excited celebration party",
    ),
    "GRATEFUL": Mood(
        id="grateful", label="Grateful", emoji="🙏", score=8, color="emerald",
        prompt="What are you thankful for today?",
        pixabay_query="gratitude thankful blessed",
    ),
    "LOVED": Mood(
        id="loved", label="Loved", emoji="🥰", score=9, color="rose",
        prompt="Who made you feel loved today?",
        pixabay_query="love heart warm",
    ),
    "CONTENT": Mood(
        id="content", label="Content", emoji="😌", score=7, color="green",
        prompt="What's bringing you peace today?",
        pixabay_query="peaceful calm nature",
    ),
    "PEACEFUL": Mood(
        id="peaceful", label="Peaceful", emoji="🕊️", score=7, color="sky",
        prompt="What's giving you a sense of calm?",
        pixabay_query="zen meditation serene",
    ),
    "HOPEFUL": Mood(
        id="hopeful", label="Hopeful", emoji="🌅", score=7, color="orange",
        prompt="What are you hoping for?",
        pixabay_query="sunrise hope future",
    ),
    "INSPIRED": Mood(
        id="inspired", label="Inspired", emoji="✨", score=8, color="violet",
        prompt="What sparked your creativity today?",
        pixabay_query="inspiration creativity light",
    ),
    "NEUTRAL": Mood(
        id="neutral", label="Neutral", emoji="😐", score=5, color="gray",
        prompt="What's on your mind?",
        pixabay_query="calm balanced minimal",
    ),
    "CONFUSED": Mood(
        id="confused", label="Confused", emoji="😕", score=4, color="indigo",
        prompt="What's puzzling you right now?",
        pixabay_query="maze question fog",
    ),
    "TIRED": Mood(
        id="tired", label="Tired", emoji="😴", score=4, color="slate",
        prompt="What's draining your energy?",
        pixabay_query="rest sleep cozy",
    ),
    "SAD": Mood(
        id="sad", label="Sad", emoji="😢", score=3, color="blue",
        prompt="What's troubling you?",
        pixabay_query="rain melancholy",
    ),
    "ANXIOUS": Mood(
        id="anxious", label="Anxious", emoji="😰", score=3, color="purple",
        prompt="What's causing you worry?",
        pixabay_query="storm clouds uncertainty",
    ),
    "LONELY": Mood(
        id="lonely", label="Lonely", emoji="🥺", score=3, color="cyan",
        prompt="Who do you wish you could talk to?",
        pixabay_query="alone solitude empty",
    ),
    "FRUSTRATED": Mood(
        id="frustrated", label="Frustrated", emoji="😤", score=3, color="orange",
        prompt="What's getting in your way?",
        pixabay_query="obstacle blocked wall",
    ),
    "STRESSED": Mood(
        id="stressed", label="Stressed", emoji="😫", score=2, color="red",
        prompt="What's weighing on your mind?",
        pixabay_query="pressure chaos busy",
    ),
    "ANGRY": Mood(
        id="angry", label="Angry", emoji="😠", score=2, color="red",
        prompt="What's frustrating you?",
        pixabay_query="fire storm thunder",
    ),
    "OVERWHELMED": Mood(
        id="overwhelmed", label="Overwhelmed", emoji="😵", score=1, color="fuchsia",
        prompt="What feels like too much right now?",
        pixabay_query="waves crowd overload",
    ),
}

_MOODS_BY_ID: Dict[str, Mood] = {mood.id: mood for mood in MOODS.values()}


def get_mood_by_id(mood_id: Optional[str]) -> Optional[Mood]:
    """Look up a mood by its id; unknown or empty ids give None"""
    if not mood_id:
        return None
    return _MOODS_BY_ID.get(mood_id)


def list_moods() -> List[Mood]:
    return list(MOODS.values())


def get_mood_trend(average_score: float) -> str:
    """Describe an average mood score in words"""
    if average_score >= 8:
        return "You've been feeling great!"
    if average_score >= 6:
        return "You've been doing well!"
    if average_score >= 4:
        return "Mixed feelings lately"
    if average_score >= 2:
        return "Been a bit down"
    return "Having a tough time"
