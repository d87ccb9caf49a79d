"""Prompt templates for narration generation."""

SINGLE_SLIDE_PROMPT = (
    "You are a professional narration writer. Look at the image and write the "
    "voice-over script for this single slide of a narrated video.\n"
    "Style: {style}\n"
    "Tone: {tone}\n"
    "Write two to four spoken sentences in the same language a viewer of this image "
    "would expect. Return only the narration text with no titles, labels, quotes, "
    "markdown or stage directions."
)

BATCH_PROMPT = (
    "You are a professional narration writer. The following {count} images are the "
    "slides of one narrated video, in timeline order. Write the voice-over script for "
    "every slide so that the narration flows naturally from one slide to the next.\n"
    "Style: {style}\n"
    "Tone: {tone}\n"
    "Each script has two to four spoken sentences with no titles, labels, markdown or "
    "stage directions. Respond with a JSON array of exactly {count} strings, where "
    "item N is the script for slide N."
)

UNSPECIFIED = "not specified"


def build_single_prompt(style_prompt: str, tone_label: str) -> str:
    return SINGLE_SLIDE_PROMPT.format(
        style=style_prompt or UNSPECIFIED,
        tone=tone_label or UNSPECIFIED,
    )


def build_batch_prompt(count: int, style_prompt: str, tone_label: str) -> str:
    return BATCH_PROMPT.format(
        count=count,
        style=style_prompt or UNSPECIFIED,
        tone=tone_label or UNSPECIFIED,
    )


def slide_marker(index: int) -> str:
    """Label placed before each image in a batch request (1-based)."""
    return f"Slide {index + 1}:"
