"""
Initial clubs and events, written to storage the first time it is found empty
"""

from datetime import datetime, timedelta, timezone
from typing import List, Optional

from campus_pulse.schemas import Category, Club, Event


def _future_date(days: int, now: datetime) -> datetime:
    # 6 PM on the day `days` from now
    return (now + timedelta(days=days)).replace(hour=18, minute=0, second=0, microsecond=0)


def initial_clubs() -> List[Club]:
    clubs = [
        ("tech-club", "Tech Club", "tech", Category.TECH, 500,
         "The official hub for all tech enthusiasts on campus. We explore everything from coding to AI."),
        ("sports-club", "Sports Club", "sports", Category.SPORTS, 1000,
         "Home of campus champions. Join us for a variety of sports and fitness activities."),
        ("music-club", "Music Club", "music", Category.MUSIC, 300,
         "Where melodies come to life. We host jam sessions, concerts, and music workshops."),
        ("social-club", "Social Club", "social", Category.SOCIAL, 750,
         "Connecting students through fun and engaging social events. Make new friends and create lasting memories."),
        ("academic-club", "Academic Club", "academic", Category.ACADEMIC, 250,
         "Fostering intellectual growth. We organize seminars, workshops, and study groups."),
    ]
    return [
        Club(
            id=club_id,
            slug=club_id,
            name=name,
            password=password,
            category=category,
            logo="",
            description=description,
            monthly_budget=budget,
        )
        for club_id, name, password, category, budget, description in clubs
    ]


def initial_events(now: Optional[datetime] = None) -> List[Event]:
    now = now or datetime.now(timezone.utc)
    events = [
        ("1", "tech-club", "annual-tech-summit-2024", "Annual Tech Summit 2024",
         "Join us for a day of insightful talks and workshops from leaders in the tech industry. "
         "A must-attend for aspiring developers and entrepreneurs.",
         7, "Main Auditorium", Category.TECH, "tech"),
        ("2", "sports-club", "inter-college-football-championship", "Inter-College Football Championship",
         "Cheer for your college team in the most anticipated sports event of the year. "
         "Witness thrilling matches and spectacular goals.",
         12, "University Sports Ground", Category.SPORTS, "sports"),
        ("3", "academic-club", "quantum-physics-seminar", "Quantum Physics Seminar",
         "A deep dive into the world of quantum mechanics with guest speaker Dr. Evelyn Reed. "
         "Expand your understanding of the universe.",
         20, "Science Block, Hall C", Category.ACADEMIC, "academic"),
        ("4", "music-club", "spring-fest-music-night", "Spring Fest Music Night",
         "An unforgettable night of live music featuring student bands and a headline performance "
         "by a surprise guest artist. Don't miss out!",
         25, "Central Plaza", Category.MUSIC, "music"),
        ("5", "social-club", "charity-gala-and-social-mixer", "Charity Gala & Social Mixer",
         "A beautiful evening dedicated to a good cause. Mingle with fellow students and faculty, "
         "with all proceeds going to local charities.",
         30, "Grand Ballroom", Category.SOCIAL, "social"),
    ]
    return [
        Event(
            id=event_id,
            club_id=club_id,
            slug=slug,
            title=title,
            description=description,
            date=_future_date(days, now),
            location=location,
            category=category,
            registration_link="#",
            image=f"https://picsum.photos/seed/{seed}/600/400",
        )
        for event_id, club_id, slug, title, description, days, location, category, seed in events
    ]
