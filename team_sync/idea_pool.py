"""Deterministic idea pool used when no remote idea backend is available.

Shared ideas, curated per-department ideas and two generated ideas that are
always exclusive to the requested department.
"""

from __future__ import annotations

from team_sync.activity_models import Activity
from team_sync.engine.seeded_random import XorShift32


_PLAYFUL_SUFFIXES: list[str] = [
    "Bonus points for team spirit!",
    "Expect high-fives and maybe a GIF reaction.",
    "Guaranteed to spark smiles and brainstorms.",
    "Warning: may cause spontaneous collaboration.",
    "Insert celebratory emoji here 🎉",
]

_REASONING_LINES: list[str] = [
    "Optimized for {dept} workflows with a dash of fun.",
    "Balances focus and play, right in the {dept} sweet spot.",
    "Targets collaboration friction points common in {dept}.",
    "Amplifies strengths while quietly fixing {dept} bottlenecks.",
    "Low setup, high impact: perfect for a busy {dept} crew.",
]


def _idea(
    id: str,
    title: str,
    description: str,
    tags: list[str],
    scope: str,
    hero: str,
    reasoning: str = "",
) -> dict:
    return {
        "id": id,
        "title": title,
        "description": description,
        "tags": tags,
        "department_scope": scope,
        "hero_alignment": hero,
        "reasoning": reasoning,
    }


_SHARED: list[dict] = [
    _idea("idea-shared-1", "Hero Huddle: Lightning Wins",
          "Each teammate shares one recent win and one blocker. Fast, friendly, and focused.",
          ["communication", "quick-setup", "hybrid"], "General", "People Hero"),
    _idea("idea-shared-2", "Mystery Match: Cross-Team Pair-Up",
          "Random pairs solve a mini-challenge together, then present their approach.",
          ["collaboration", "icebreaker", "remote-friendly"], "General", "Culture Hero"),
    _idea("idea-shared-3", "Retro Roulette",
          "Spin a wheel of retro prompts to spark fresh insights without the same-old format.",
          ["creativity", "communication", "remote-friendly"], "General", "Ops Hero"),
]

_BY_DEPARTMENT: dict[str, list[dict]] = {
    "Engineering": [
        _idea("idea-eng-1", "Bug Bash Arcade",
              "Turn pesky issues into points: squash bugs in rounds with playful awards.",
              ["problem-solving", "remote-friendly", "low-cost"], "Engineering", "Product Hero"),
        _idea("idea-eng-2", "Design Doc Speed Dating",
              "5-minute lightning reviews to align on architecture without the calendar drag.",
              ["communication", "collaboration", "hybrid"], "Engineering", "Ops Hero"),
    ],
    "Marketing": [
        _idea("idea-mkt-1", "Campaign Jam Session",
              "Rapid-fire brainstorming to remix a live campaign with fresh hooks.",
              ["creativity", "collaboration", "hybrid"], "Marketing", "Culture Hero"),
        _idea("idea-mkt-2", "Audience Avatar Workshop",
              "Craft playful personas to sharpen messaging and spark empathy.",
              ["communication", "creativity", "in-person"], "Marketing", "People Hero"),
    ],
    "Sales": [
        _idea("idea-sales-1", "Objection Olympics",
              "Gamify common objections and trade winning comebacks in teams.",
              ["communication", "icebreaker", "remote-friendly"], "Sales", "Culture Hero"),
        _idea("idea-sales-2", "Pitch Karaoke",
              "Spin a wheel, pitch a random product, score style, clarity and creativity.",
              ["creativity", "collaboration", "in-person"], "Sales", "People Hero"),
    ],
    "HR": [
        _idea("idea-hr-1", "Policy Puzzle Hunt",
              "Turn key policy learnings into a playful scavenger quiz.",
              ["communication", "low-cost", "remote-friendly"], "HR", "Ops Hero"),
        _idea("idea-hr-2", "Recognition Relay",
              "Pass the kudos baton: structured peer shoutouts that make culture hum.",
              ["culture", "icebreaker", "hybrid"], "HR", "Culture Hero"),
    ],
    "Product": [
        _idea("idea-pm-1", "Opportunity Framing Sprint",
              "Quickly transform raw insights into crisp opportunity statements.",
              ["problem-solving", "communication", "hybrid"], "Product", "Product Hero"),
        _idea("idea-pm-2", "Roadmap Show & Tell",
              "Micro-demos and roadmap highlights to align momentum and focus.",
              ["communication", "collaboration", "remote-friendly"], "Product", "Ops Hero"),
    ],
}


def with_playful_tone(text: str) -> str:
    """Append a suffix picked deterministically from the text itself."""
    suffix = XorShift32.from_text(text).choice(_PLAYFUL_SUFFIXES)
    return f"{text.strip()} {suffix}".strip()


def playful_reasoning(department: str, rng: XorShift32) -> str:
    return rng.choice(_REASONING_LINES).format(dept=department)


def build_idea_pool(department: str, rng: XorShift32 | None = None) -> list[Activity]:
    """Return shared + department ideas + two generated exclusive ideas.

    *rng* only picks reasoning lines for ideas that ship without one; when
    omitted the pool is fully deterministic for a department.
    """
    dept = department or "General"
    rng = rng or XorShift32.from_text(dept)

    raw = [*_SHARED, *_BY_DEPARTMENT.get(dept, [])]
    raw.append(_idea(
        "idea-generic-1", f"{dept} Hero Quest",
        f"A themed challenge aligned to {dept} workflows with playful badges.",
        ["collaboration", "creativity", "hybrid"], dept, "Culture Hero",
        reasoning=f"Designed to energize {dept} with low overhead and high smiles.",
    ))
    raw.append(_idea(
        "idea-generic-2", f"{dept} Sync & Sprint",
        f"Short burst planning plus a mini-retro tailored for {dept}.",
        ["communication", "problem-solving", "quick-setup"], dept, "Ops Hero",
        reasoning=f"Balances speed and structure for {dept} teams.",
    ))

    pool: list[Activity] = []
    for item in raw:
        pool.append(Activity(
            **{
                **item,
                "description": with_playful_tone(item["description"]),
                "reasoning": item["reasoning"] or playful_reasoning(dept, rng),
                "duration": 45,
                "budget": "low" if "low-cost" in item["tags"] else "medium",
            }
        ))
    return pool
