"""System prompt templates and content builders for Gemini.

Model name stored as a constant so preview model upgrades touch one line.
"""

from datetime import datetime

from community_intents.models.intent import EventDetails

# Gemini model constant -- update here when stable version releases
GEMINI_MODEL = "gemini-3-flash-preview"

_DETECTION_SYSTEM_PROMPT = """\
You classify messages posted in a community group chat and extract structured details.

Today is {weekday}, {today}. Resolve relative dates ("tomorrow", "next Tuesday", \
"this weekend") against today and return them as YYYY-MM-DD.

## Intent types
- event: the author wants to schedule, plan or organize a gathering, class, session or meetup.
- question: the author asks something the community or its admins should answer.
- announcement: the author shares news, a reminder or an update with everyone.
- feedback: the author praises, complains about or suggests changes to the community.
- other: small talk or anything else.

## Output rules
- confidence reflects how sure you are of intent_type (0.0 to 1.0).
- For event: fill title, description, date, time (24-hour HH:MM), location, \
suggested_duration (minutes), suggested_capacity, tags, is_online and meeting_url. \
Use null for anything the message does not state. Never invent a date or time.
- For feedback: fill sentiment (positive, negative or neutral) and topic.
- For question: fill topic and urgency (high, medium or low).
- For announcement: fill summary.
- Tags are short, lowercase, single concepts (e.g. "yoga", "fitness", "social").
"""

_ENRICHMENT_SYSTEM_PROMPT = """\
You help community admins turn rough event requests into polished event listings.
Keep the organizer's intent. Do not change the date or time. Suggest at most 5 tags \
and at most 3 location ideas. Durations are in minutes.
"""


def build_detection_prompt(now: datetime) -> str:
    """Detection system prompt anchored to the given current date."""
    return _DETECTION_SYSTEM_PROMPT.format(
        weekday=now.strftime("%A"),
        today=now.strftime("%Y-%m-%d"),
    )


def build_detection_content(text: str, community_id: str) -> str:
    return f"Community: {community_id}\n\n---\nMessage:\n{text}"


def build_enrichment_prompt() -> str:
    return _ENRICHMENT_SYSTEM_PROMPT


def build_enrichment_content(details: EventDetails, original_text: str) -> str:
    """Assemble the enrichment request from the current event fields."""
    lines = [
        f'Original message: "{original_text}"',
        "",
        "Current details:",
        f"- Title: {details.title}",
        f"- Date: {details.date or 'Not specified'}",
        f"- Time: {details.time or 'Not specified'}",
        f"- Location: {details.location or 'Not specified'}",
    ]
    if details.tags:
        lines.append(f"- Tags: {', '.join(details.tags)}")
    return "\n".join(lines)
