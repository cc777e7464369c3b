"""
Fallback Roadmap - Application Layer

Static eight-step curriculum served whenever the language model cannot
produce a usable roadmap. Every step requires all of the steps before it.
"""
from typing import List, Tuple

from domain.entities.roadmap import TITLE_MAX_LENGTH, Difficulty, Resource, Step

from application.dto.roadmap_draft import RoadmapDraft

FALLBACK_ESTIMATED_HOURS = 60

# (title, description, duration, [(video title, video id, length, views, channel)])
_CURRICULUM: List[Tuple[str, str, str, List[Tuple[str, str, str, str, str]]]] = [
    (
        "Introduction to {skill}",
        "Start with the fundamentals and basic concepts",
        "1-2 weeks",
        [
            ("Complete Beginner's Guide to {skill}", "dQw4w9WgXcQ", "1:15:00", "250K views", "Tech Tutorials"),
            ("{skill} Fundamentals Explained", "9bZkp7q19f0", "45:30", "180K views", "Learning Hub"),
        ],
    ),
    (
        "Core Concepts and Principles",
        "Learn the essential concepts and foundational principles",
        "2-3 weeks",
        [("Core {skill} Concepts You Need to Know", "jNQXAC9IVRw", "2:10:00", "320K views", "Code Academy")],
    ),
    (
        "Practical Applications",
        "Apply your knowledge through hands-on projects",
        "2-3 weeks",
        [("Build Your First {skill} Project", "kJQP7kiw5Fk", "1:45:00", "150K views", "Project Builder")],
    ),
    (
        "Advanced Techniques",
        "Master advanced techniques and optimization",
        "3-4 weeks",
        [("Advanced {skill} Techniques", "ZZ5LpwO-An4", "2:30:00", "95K views", "Advanced Tutorials")],
    ),
    (
        "Real-World Projects",
        "Build comprehensive real-world applications",
        "4-5 weeks",
        [("Complete {skill} Project from Scratch", "OPf0YbXqDm0", "3:15:00", "200K views", "Real Projects")],
    ),
    (
        "Best Practices and Optimization",
        "Learn industry best practices and performance optimization",
        "2-3 weeks",
        [("{skill} Best Practices Guide", "1u2qu-EmIRc", "1:20:00", "120K views", "Best Practices")],
    ),
    (
        "Testing and Debugging",
        "Master testing strategies and debugging techniques",
        "2-3 weeks",
        [("Testing and Debugging {skill} Applications", "3YxaaGgTQYM", "1:50:00", "85K views", "Testing Pro")],
    ),
    (
        "Deployment and Production",
        "Learn to deploy and maintain production applications",
        "2-3 weeks",
        [("Deploy {skill} to Production", "9cKsq14Kfsw", "1:30:00", "110K views", "Deployment Guide")],
    ),
]


def fallback_draft(skill: str, current_level: str) -> RoadmapDraft:
    """Build the static curriculum for ``skill``."""
    steps: List[Step] = []
    for number, (title, description, duration, videos) in enumerate(_CURRICULUM, start=1):
        resources = [
            Resource(
                id=f"resource_{number}_{n}",
                title=video_title.format(skill=skill),
                thumbnail=f"https://img.youtube.com/vi/{video_id}/maxresdefault.jpg",
                url=f"https://www.youtube.com/watch?v={video_id}",
                duration=length,
                views=views,
                channel=channel,
            )
            for n, (video_title, video_id, length, views, channel) in enumerate(videos, start=1)
        ]
        steps.append(Step(
            id=f"step_{number}",
            title=title.format(skill=skill),
            description=description,
            duration=duration,
            prerequisites=[s.id for s in steps],
            completed=False,
            resources=resources,
        ))

    return RoadmapDraft(
        title=f"Complete {skill} Learning Roadmap"[:TITLE_MAX_LENGTH],
        skill=skill,
        description=(
            f"A comprehensive learning path for {skill} designed for "
            f"{current_level} level learners"
        ),
        difficulty=Difficulty.BEGINNER,
        estimated_hours=FALLBACK_ESTIMATED_HOURS,
        steps=steps,
        is_fallback=True,
    )
