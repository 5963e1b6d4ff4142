STABILITY_NEGATIVE_PROMPT = (
    "different person, altered face, changed ethnicity, different skin tone, "
    "deformed face, bad anatomy, disfigured, ugly, blurry, low quality, watermark, "
    "signature, missing text, small text, no text, illegible text, no decorations, "
    "plain background, minimal decoration"
)

STABILITY_SCENE_NEGATIVE_PROMPT = (
    "different person, altered face, changed ethnicity, different skin tone, "
    "deformed face, bad anatomy, disfigured face, watermark, signature"
)


def _message_line(template: str, message: str | None) -> str:
    message = (message or "").strip()
    return template.format(message=message) if message else ""


def create_card_prompt(message: str | None = None) -> str:
    """
    Crea el prompt para la edición en una sola pasada con OpenAI.

    Args:
        message (str): Mensaje opcional que se añade bajo el texto principal

    Returns:
        str: Prompt listo para enviar al endpoint de edición
    """
    return f"""Create an Eid greeting card that preserves the person's identity exactly.

CRITICAL INSTRUCTIONS:
1. ADD LARGE, BOLD "EID MUBARAK!" TEXT at the top or bottom of the image in beautiful gold/metallic lettering
2. The text must be very prominent and easy to read - make it stand out
3. Add decorative Islamic patterns, gold crescent moons, and stars around the borders
4. Keep the central person completely unchanged - preserve all facial features and identity

The "EID MUBARAK!" text should be the most eye-catching element after the person.
{_message_line('Also add this message in elegant text: "{message}"', message)}""".rstrip()


def create_stability_card_prompt(message: str | None = None) -> str:
    return f"""Professional Eid greeting card with clear visible "EID MUBARAK!" text.

The image MUST have:
- Very large, bold, golden "EID MUBARAK!" text at the top of the image
- Text that is clearly visible and readable
- The exact same person from the photo with unchanged identity and features
- Decorative Islamic elements including crescent moons, stars, and ornate patterns

The "EID MUBARAK!" text should be:
- Centered at the top
- Large and impossible to miss
- Gold or metallic in appearance
- Surrounded by a subtle glow or sparkle effect
- Professional typography similar to commercial greeting cards

{_message_line('Also include this message in smaller text below: "{message}"', message)}

This is a professional photo greeting card with text overlay, like Hallmark or American Greetings cards."""


def create_stability_scene_prompt(message: str | None = None) -> str:
    """Prompt for the first stage of the combined pipeline: the festive scene."""
    return f"""Photorealistic Eid greeting card featuring this exact person with unchanged identity.

CRITICAL: Preserve 100% of the person's facial features, skin tone, and identity exactly as shown.

Create a decorative Eid-themed background with:
- Gold crescent moons and stars
- Festive Islamic patterns as a frame
- Elegant gold/silver accents and subtle sparkle effects
- Add "EID MUBARAK!" text at the top or bottom in beautiful gold lettering

Keep the person's identity completely unchanged - this is the most important aspect.
{_message_line('Include the message: "{message}" in elegant text.', message)}""".rstrip()


def create_text_prompt(message: str | None = None) -> str:
    """Prompt for the second stage of the combined pipeline: text only."""
    return f"""Add LARGE, PROMINENT "EID MUBARAK!" TEXT to this image.

IMPORTANT INSTRUCTIONS:
1. The text MUST be very bold, large, and clearly visible
2. Place the text at the top or bottom of the image
3. Use elegant gold/metallic styling with Islamic decorative elements
4. Text should be the main focal point after the person's face

{_message_line('Also add this personalized message in stylish text: "{message}"', message)}

Make sure the text is impossible to miss - it should be the most eye-catching element after the person."""


def create_portrait_prompt(extra: str | None = None) -> str:
    return f"""Transform the person in this image into a festive Eid celebration portrait.
Add decorative Eid elements, crescent moons, lanterns, and festive ornaments around them.
Make the image vibrant and colorful with a greeting message saying "Eid Mubarak!".
Maintain the person's likeness while adding a festive and celebratory Eid mood.
{(extra or '').strip()}""".rstrip()


def _for_name(name: str | None) -> str:
    name = (name or "").strip()
    return f" for {name}" if name else ""


def create_messages_prompt(name: str | None = None, count: int = 5) -> str:
    return f"""Generate {count} warm, personalized Eid greeting messages{_for_name(name)}.
Each message should be short (under 150 characters), uplifting, and include "Eid Mubarak" or similar Eid greetings.
The messages should be diverse in tone and content.
Format the output as a JSON object with a single key "messages" holding an array of strings."""


def default_messages(name: str | None = None) -> list[str]:
    """
    Devuelve la lista fija de mensajes que se usa cuando falla la generación.
    """
    intro = _for_name(name)
    return [
        f"Eid Mubarak{intro}! May this special day bring peace, happiness, and prosperity to your life.",
        f"Wishing you a joyous Eid{intro}! May the blessings of Allah fill your life with happiness and success.",
        f"Happy Eid{intro}! May Allah accept your good deeds, forgive your transgressions and ease the suffering of all people around the globe.",
        f"Eid Mubarak{intro}! May this Eid bring joy, health and wealth to you and your family.",
        f"Sending Eid wishes{intro}! May your faith bring you peace and prosperity on this special day.",
    ]
