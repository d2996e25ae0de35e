"""Prompts for LLM-based note formatting."""

SYSTEM_PROMPT = "You are a helpful note-formatting assistant. Always respond with valid JSON."

FORMAT_PROMPT_TEMPLATE = """You are a note-formatting AI. Format the following Instagram reel caption into a clean, organized note.

Rules:
1. Extract a short title (max 50 chars)
2. Detect content type: Recipe, Workout, Travel, Educational, DIY, or Other
3. Format with sections, bullet points, and emojis
4. If it's a recipe, structure as: Title, Type, Ingredients (bullet points), Instructions (numbered)
5. If it's a workout, structure as: Title, Type, Exercises (with sets/reps)
6. Keep it concise and readable

Caption:
{transcript}

Respond ONLY with valid JSON in this format:
{{
  "title": "Short title here",
  "contentType": "Recipe|Workout|Travel|Educational|DIY|Other",
  "structuredText": "Formatted text with sections and emojis"
}}"""


def build_format_prompt(transcript: str) -> str:
    """Embed the transcript verbatim in the formatting instructions."""
    return FORMAT_PROMPT_TEMPLATE.format(transcript=transcript)
