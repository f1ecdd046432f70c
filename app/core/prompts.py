"""Fixed prompt text used by the chat proxy."""

SYSTEM_PROMPT = (
    "Eres un asistente útil y amigable para WhatsApp. "
    "Responde en español de manera natural, clara y concisa. "
    "Usa emojis apropiados."
)

FALLBACK_TEMPLATE = (
    'Recibí tu mensaje: "{preview}". Estamos teniendo dificultades técnicas.'
)

PREVIEW_LENGTH = 100


def preview(text: str, length: int = PREVIEW_LENGTH) -> str:
    """Truncate text for logs and fallback replies."""
    return text[:length]


def fallback_response(user_message: str) -> str:
    """Reply the bot can show its user when the upstream call fails."""
    return FALLBACK_TEMPLATE.format(preview=preview(user_message))
