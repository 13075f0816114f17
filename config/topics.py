"""Static topic catalog with primary and simplified fallback queries."""

from __future__ import annotations

from typing import List, Optional

from models import Topic


class FreshnessTier:
    """Maximum article age per topic family, in hours."""

    # Time-sensitive news that goes stale quickly
    BREAKING = 24
    # Slower-moving tech/science stories, tolerates weekend gaps
    TECH = 120


NEWS_TOPICS: List[Topic] = [
    Topic(
        name="World News",
        query="breaking world news today major events",
        fallback_query="world news",
        freshness_hours=FreshnessTier.BREAKING,
    ),
    Topic(
        name="US News",
        query="united states news headlines today",
        fallback_query="USA news",
        freshness_hours=FreshnessTier.BREAKING,
    ),
    Topic(
        name="Redlands CA Local News",
        query="Redlands California news",
        fallback_query="Redlands news",
        freshness_hours=FreshnessTier.BREAKING,
    ),
    Topic(
        name="NBA",
        query="NBA games highlights players",
        fallback_query="NBA basketball",
        freshness_hours=FreshnessTier.BREAKING,
    ),
    Topic(
        name="AI & Machine Learning",
        query="artificial intelligence AI machine learning",
        fallback_query="AI technology",
        freshness_hours=FreshnessTier.TECH,
    ),
    Topic(
        name="Electric Vehicles",
        query="electric vehicle EV Tesla Rivian",
        fallback_query="electric car",
        freshness_hours=FreshnessTier.TECH,
    ),
    Topic(
        name="Autonomous Driving",
        query="self-driving autonomous vehicle",
        fallback_query="self driving car",
        freshness_hours=FreshnessTier.TECH,
    ),
    Topic(
        name="Humanoid Robots",
        query="humanoid robot Tesla Optimus",
        fallback_query="robot technology",
        freshness_hours=FreshnessTier.TECH,
    ),
    Topic(
        name="eVTOL & Flying Vehicles",
        query="flying car urban air mobility",
        fallback_query="electric aviation aircraft",
        freshness_hours=FreshnessTier.TECH,
    ),
    Topic(
        name="Tech Gadgets",
        query="consumer technology gadget smartphone",
        fallback_query="new tech products",
        freshness_hours=FreshnessTier.TECH,
    ),
    Topic(
        name="Anti-Aging Science",
        query="longevity anti-aging research",
        fallback_query="aging health research medicine",
        freshness_hours=FreshnessTier.TECH,
    ),
    Topic(
        name="Virtual Medicine",
        query="telemedicine digital health telehealth",
        fallback_query="online healthcare medical technology",
        freshness_hours=FreshnessTier.TECH,
    ),
    Topic(
        name="Travel",
        query="travel industry airlines destinations",
        fallback_query="travel news",
        freshness_hours=FreshnessTier.BREAKING,
    ),
]


def get_topic(name: str) -> Optional[Topic]:
    """Look up a catalog topic by its name."""
    for topic in NEWS_TOPICS:
        if topic.name == name:
            return topic
    return None
